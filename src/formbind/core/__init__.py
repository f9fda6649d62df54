"""Core binding logic package.

This package contains the pure binding and transaction logic.
Modules here must not import GUI frameworks (PySide6, Qt, etc.).
"""

from .errors import (
    BindingError,
    CommitAborted,
    DuplicateBinding,
    FieldValidationError,
    NoRecordBound,
    ReadOnlyViolation,
    SlotNotFound,
)
from .cells import AttributeCell, Observable, ObservableCell, ValueCell, ValueChangeEvent
from .records import ObjectRecord, Record
from .transactional import TransactionalCell
from .fields import BasicField, BasicFieldFactory, Field, FieldFactory
from .validation import InvalidValueError
from .binding import GroupState, InputBinding
from .group import BindingGroup, CommitEvent, CommitHandler, CommitState

__all__ = [
    "AttributeCell",
    "BasicField",
    "BasicFieldFactory",
    "BindingError",
    "BindingGroup",
    "CommitAborted",
    "CommitEvent",
    "CommitHandler",
    "CommitState",
    "DuplicateBinding",
    "Field",
    "FieldFactory",
    "FieldValidationError",
    "GroupState",
    "InputBinding",
    "InvalidValueError",
    "NoRecordBound",
    "Observable",
    "ObservableCell",
    "ObjectRecord",
    "ReadOnlyViolation",
    "Record",
    "SlotNotFound",
    "TransactionalCell",
    "ValueCell",
    "ValueChangeEvent",
]

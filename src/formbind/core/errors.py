"""
Exception types raised by the binding layer.

Bind-time problems derive from BindingError and abort only the operation that
raised them. CommitAborted is raised by commit handlers (and by the group
itself) to veto a commit.
"""

from typing import Iterable, Optional


class BindingError(Exception):
    """Base class for errors raised while binding fields to slots."""


class DuplicateBinding(BindingError):
    """Raised when a slot name is already claimed by a different field."""

    def __init__(self, slot_name: str):
        super().__init__(f"Slot '{slot_name}' is already bound to another field")
        self.slot_name = slot_name


class SlotNotFound(BindingError):
    """Raised when the record has no slot with the requested name."""

    def __init__(self, slot_names: Iterable[str]):
        self.slot_names = list(slot_names)
        names = ", ".join(f"'{name}'" for name in self.slot_names)
        super().__init__(f"Record has no slot named {names}")


class NoRecordBound(BindingError):
    """Raised when an operation needs a record but none has been set."""

    def __init__(self, message: str = "No record is bound to the group"):
        super().__init__(message)


class ReadOnlyViolation(Exception):
    """Raised when writing to a read-only cell or field."""


class CommitAborted(Exception):
    """
    Raised to veto a group commit.

    Commit handlers raise this from pre_commit() to abort the transaction, or
    from post_commit() to report a follow-up failure after the data has been
    committed.
    """

    def __init__(self, reason: str = "Commit aborted", cause: Optional[BaseException] = None):
        super().__init__(reason)
        self.reason = reason
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class FieldValidationError(CommitAborted):
    """Raised by commit() when one or more bound fields fail validation."""

    def __init__(self, invalid_fields: dict):
        """
        Args:
            invalid_fields: Mapping of slot name to the InvalidValueError raised
                by that slot's field.
        """
        self.invalid_fields = dict(invalid_fields)
        details = "; ".join(f"{name}: {error}" for name, error in self.invalid_fields.items())
        super().__init__(f"Validation failed ({details})")

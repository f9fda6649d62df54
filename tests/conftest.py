"""
Pytest configuration and shared fixtures.

This file contains pytest configuration and reusable test fixtures.
"""

import pytest

from formbind.core.cells import ObservableCell, ValueCell
from formbind.core.fields import BasicField
from formbind.core.group import BindingGroup, CommitHandler
from formbind.core.records import Record
from formbind.core.errors import CommitAborted


class EventRecorder:
    """Callable listener collecting the values of received events."""

    def __init__(self):
        self.values = []

    def __call__(self, event):
        self.values.append(event.value)

    @property
    def count(self) -> int:
        return len(self.values)


class RecordingHandler(CommitHandler):
    """Commit handler logging its calls into a shared list."""

    def __init__(self, name, calls, veto_pre=False, veto_post=False):
        self.name = name
        self.calls = calls
        self.veto_pre = veto_pre
        self.veto_post = veto_post

    def pre_commit(self, event):
        self.calls.append((self.name, "pre"))
        if self.veto_pre:
            raise CommitAborted(f"{self.name} vetoed")

    def post_commit(self, event):
        self.calls.append((self.name, "post"))
        if self.veto_post:
            raise CommitAborted(f"{self.name} failed after commit")


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def person_record() -> Record:
    """
    Create a record with a few observable slots.

    Returns:
        A Record with name, age and email slots plus a read-only id slot.
    """
    return Record.from_values(
        {"id": "P-1", "name": "Ada", "age": 30, "email": "ada@example.org"},
        read_only=("id",)
    )


@pytest.fixture
def plain_record() -> Record:
    """Create a record whose cells do not support change notification."""
    record = Record()
    record.add_slot("x", ValueCell(1))
    record.add_slot("y", ValueCell(2))
    return record


@pytest.fixture
def xy_record() -> Record:
    return Record.from_values({"x": 1, "y": 2})


@pytest.fixture
def group(person_record) -> BindingGroup:
    """
    Create a buffered group with name and age bound to basic fields.
    """
    group = BindingGroup(person_record)
    group.bind(BasicField("Name"), "name")
    group.bind(BasicField("Age"), "age")
    return group


@pytest.fixture
def observable_cell() -> ObservableCell:
    return ObservableCell(30)

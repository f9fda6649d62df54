"""
Binding groups: a set of fields bound to the slots of one record.

The group owns the bindings and the group-level flags (buffered, enabled,
read-only) and runs the commit/discard transaction across every bound cell.

Example:
    record = Record.from_values({"name": "Ada", "age": 36})
    group = BindingGroup(record)
    group.bind(name_field, "name")
    group.bind(age_field, "age")

    age_field.set_value(37)     # written to the record, not yet announced
    group.commit()              # one notification per changed cell
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .binding import GroupState, InputBinding
from .errors import (
    BindingError,
    CommitAborted,
    DuplicateBinding,
    FieldValidationError,
    NoRecordBound,
    SlotNotFound,
)
from .fields import BasicFieldFactory, Field, FieldFactory
from .transactional import TransactionalCell
from .validation import InvalidValueError
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)


class CommitState(Enum):
    """Phase of the group's commit cycle."""

    IDLE = "idle"
    VALIDATING = "validating"
    COMMITTING = "committing"
    ROLLING_BACK = "rolling back"


@dataclass(frozen=True)
class CommitEvent:
    """Passed to commit handlers; refers to the group being committed."""

    group: "BindingGroup"


class CommitHandler:
    """
    Hook invoked by BindingGroup.commit() around the transactional apply.

    Handlers may inspect the group and veto the commit by raising
    CommitAborted. Both methods do nothing by default.
    """

    def pre_commit(self, event: CommitEvent) -> None:
        """
        Called after every cell has started its transaction, before any is
        committed. Raise CommitAborted to roll back every cell.
        """

    def post_commit(self, event: CommitEvent) -> None:
        """
        Called after every cell has been committed. Raising CommitAborted
        reports a failure to the caller but does not undo the commit.
        """


class BindingGroup:
    """
    Binds fields to the named slots of a record and commits them atomically.

    Bindings are kept in insertion order; commit, rollback and the cascading
    flag setters all visit them in that order.
    """

    def __init__(self, record: Optional[Any] = None, buffered: bool = True):
        """
        Initialize the group.

        Args:
            record: Slot provider exposing get_slot(name). May be set later
                with set_record().
            buffered: Whether edits are announced only on commit().
        """
        self._record = None
        self._buffered = bool(buffered)
        self._enabled = True
        self._read_only = False
        self._bindings: dict[str, InputBinding] = {}
        self._field_bindings: dict[Field, InputBinding] = {}
        self._commit_handlers: list[CommitHandler] = []
        self._state = CommitState.IDLE

        if record is not None:
            self.set_record(record)

    # ------------------------------------------------------------------
    # Record
    # ------------------------------------------------------------------

    @property
    def record(self) -> Optional[Any]:
        return self._record

    def set_record(self, record: Optional[Any]) -> None:
        """
        Rebind every field to the matching slot of a new record.

        Every slot is looked up before anything changes, so a record that
        lacks some slot leaves the group on its previous record. Uncommitted
        buffered edits are rolled back on the previous record.

        Args:
            record: The new record, or None to unresolve every binding.

        Raises:
            SlotNotFound: Listing every bound slot missing from record.
            BindingError: If called while a commit is in progress.
        """
        self._ensure_idle("change the record")

        if record is not None:
            missing = [name for name in self._bindings if record.get_slot(name) is None]
            if missing:
                raise SlotNotFound(missing)

        modified = [binding.slot_name for binding in self._bindings.values() if binding.is_modified()]
        if modified:
            logger.warning(f"Rolling back uncommitted edits in slots: {', '.join(modified)}")

        self._record = record
        state = self._group_state()
        for binding in self._bindings.values():
            if record is None:
                binding.release()
            else:
                binding.resolve(record)
                binding.configure(state)

        logger.debug(f"Record set on group with {len(self._bindings)} binding(s)")

    # ------------------------------------------------------------------
    # Group flags
    # ------------------------------------------------------------------

    @property
    def buffered(self) -> bool:
        return self._buffered

    @buffered.setter
    def buffered(self, buffered: bool) -> None:
        buffered = bool(buffered)
        if buffered == self._buffered:
            return
        self._buffered = buffered
        self._configure_all()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)
        self._configure_all()

    @property
    def read_only(self) -> bool:
        return self._read_only

    @read_only.setter
    def read_only(self, read_only: bool) -> None:
        self._read_only = bool(read_only)
        self._configure_all()

    @property
    def state(self) -> CommitState:
        return self._state

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def bind(self, field: Field, slot_name: str) -> InputBinding:
        """
        Bind a field to a slot of the record.

        Binding a field to the slot it is already bound to returns the
        existing binding. Binding a bound field to another slot moves it.
        Without a record the binding is kept unresolved until set_record().

        Returns:
            The binding.

        Raises:
            DuplicateBinding: If slot_name is bound to another field.
            SlotNotFound: If the record has no such slot.
        """
        existing = self._bindings.get(slot_name)
        if existing is not None:
            if existing.field is field:
                return existing
            raise DuplicateBinding(slot_name)

        binding = InputBinding(field, slot_name)
        if self._record is not None:
            binding.resolve(self._record)

        previous = self._field_bindings.get(field)
        if previous is not None:
            del self._bindings[previous.slot_name]
            previous.drop_cell()
            logger.debug(f"{field!r} moved from slot '{previous.slot_name}' to '{slot_name}'")

        self._bindings[slot_name] = binding
        self._field_bindings[field] = binding
        if binding.is_resolved:
            binding.configure(self._group_state())

        logger.debug(f"Bound {field!r} to slot '{slot_name}'")
        return binding

    def build_and_bind(self, slot_name: str, factory: Optional[FieldFactory] = None,
                       caption: Optional[str] = None) -> Field:
        """
        Create a field suited to the slot's type and bind it.

        Args:
            slot_name: Slot to bind.
            factory: Field factory; defaults to BasicFieldFactory.
            caption: Field caption; defaults to a caption derived from the
                slot name ("first_name" -> "First name").

        Returns:
            The new, bound field.

        Raises:
            NoRecordBound: If the group has no record.
            SlotNotFound: If the record has no such slot.
            DuplicateBinding: If the slot is already bound.
        """
        if self._record is None:
            raise NoRecordBound(f"Cannot build a field for slot '{slot_name}' without a record")

        slot = self._record.get_slot(slot_name)
        if slot is None:
            raise SlotNotFound([slot_name])
        if slot_name in self._bindings:
            raise DuplicateBinding(slot_name)

        factory = factory or BasicFieldFactory()
        field = factory.create_field(slot.type, caption or caption_for_slot(slot_name))
        self.bind(field, slot_name)
        return field

    def unbind(self, field: Field) -> InputBinding:
        """
        Remove a field from the group, rolling back its uncommitted edits.

        Returns:
            The removed binding.

        Raises:
            BindingError: If the field is not bound in this group.
        """
        binding = self._field_bindings.pop(field, None)
        if binding is None:
            raise BindingError(f"{field!r} is not bound to this group")
        del self._bindings[binding.slot_name]
        binding.release()
        logger.debug(f"Unbound {field!r} from slot '{binding.slot_name}'")
        return binding

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def bindings(self) -> list[InputBinding]:
        return list(self._bindings.values())

    @property
    def fields(self) -> list[Field]:
        return [binding.field for binding in self._bindings.values()]

    @property
    def slot_names(self) -> list[str]:
        return list(self._bindings)

    def get_binding(self, slot_name: str) -> Optional[InputBinding]:
        return self._bindings.get(slot_name)

    def get_field(self, slot_name: str) -> Optional[Field]:
        binding = self._bindings.get(slot_name)
        return binding.field if binding is not None else None

    def get_slot_name(self, field: Field) -> Optional[str]:
        binding = self._field_bindings.get(field)
        return binding.slot_name if binding is not None else None

    def unbound_slot_names(self) -> list[str]:
        """
        Return the record's slot names that no field is bound to.

        Raises:
            NoRecordBound: If the group has no record.
        """
        if self._record is None:
            raise NoRecordBound()
        return [name for name in self._record.slot_names() if name not in self._bindings]

    def is_modified(self) -> bool:
        """True if any bound cell holds uncommitted buffered edits."""
        return any(binding.is_modified() for binding in self._bindings.values())

    def is_valid(self) -> bool:
        return all(binding.field.is_valid() for binding in self._bindings.values())

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, field: object) -> bool:
        return field in self._field_bindings

    # ------------------------------------------------------------------
    # Commit handlers
    # ------------------------------------------------------------------

    @property
    def commit_handlers(self) -> tuple[CommitHandler, ...]:
        return tuple(self._commit_handlers)

    def add_commit_handler(self, handler: CommitHandler) -> None:
        self._commit_handlers.append(handler)

    def remove_commit_handler(self, handler: CommitHandler) -> None:
        if handler in self._commit_handlers:
            self._commit_handlers.remove(handler)

    # ------------------------------------------------------------------
    # Transaction
    # ------------------------------------------------------------------

    def commit(self) -> None:
        """
        Apply every pending edit as one transaction.

        Steps: validate every field; start a transaction on every cell; run
        pre_commit handlers; commit every cell; run post_commit handlers.
        A failure before the cells are committed rolls every cell back. A
        failure in post_commit is raised but the data stays committed. A
        value change listener failing while the cells commit is raised only
        after the post_commit handlers have run.

        Raises:
            NoRecordBound: If some binding is unresolved.
            FieldValidationError: If any field is invalid. Nothing changes.
            CommitAborted: If a handler vetoes or fails.
            BindingError: If a commit or discard is already running.
        """
        self._ensure_idle("commit")

        unresolved = [binding.slot_name for binding in self._bindings.values() if not binding.is_resolved]
        if unresolved:
            raise NoRecordBound(f"Cannot commit unresolved slots: {', '.join(unresolved)}")

        event = CommitEvent(self)
        cells = self._cells()
        self._state = CommitState.VALIDATING
        try:
            self._validate_fields()

            for cell in cells:
                cell.start_transaction()

            try:
                self._run_handlers(event, "pre_commit")
            except CommitAborted as e:
                logger.warning(f"Commit vetoed: {e.reason}")
                self._state = CommitState.ROLLING_BACK
                self._rollback_cells(cells)
                raise

            self._state = CommitState.COMMITTING
            listener_errors = self._commit_cells(cells)
            logger.debug(f"Committed {len(cells)} cell(s)")

            try:
                self._run_handlers(event, "post_commit")
            except CommitAborted as e:
                if not listener_errors:
                    raise
                logger.error(f"post_commit failed after a listener failure: {e.reason}")

            if listener_errors:
                first = listener_errors[0]
                raise CommitAborted("Value change listener failed during commit", cause=first) from first
        finally:
            self._state = CommitState.IDLE

    def discard(self) -> None:
        """
        Roll back every cell to its value before the pending edits.

        No commit handler is invoked. Every cell is rolled back even if some
        rollback fails; the first failure is raised afterwards.

        Raises:
            BindingError: If a commit is running.
        """
        self._ensure_idle("discard")

        self._state = CommitState.ROLLING_BACK
        try:
            errors = self._rollback_cells(self._cells())
            for binding in self._bindings.values():
                if binding.is_resolved:
                    binding.field.discard()
        finally:
            self._state = CommitState.IDLE

        if errors:
            raise errors[0]

    def _validate_fields(self) -> None:
        invalid = {}
        for binding in self._bindings.values():
            try:
                binding.field.validate()
            except InvalidValueError as e:
                invalid[binding.slot_name] = e
        if invalid:
            logger.info(f"Commit rejected, invalid slots: {', '.join(invalid)}")
            raise FieldValidationError(invalid)

    def _run_handlers(self, event: CommitEvent, phase: str) -> None:
        for handler in list(self._commit_handlers):
            try:
                getattr(handler, phase)(event)
            except CommitAborted:
                raise
            except Exception as e:
                raise CommitAborted(f"{phase} handler {handler!r} failed: {e}", cause=e) from e

    def _commit_cells(self, cells: list[TransactionalCell]) -> list[Exception]:
        errors = []
        for cell in cells:
            try:
                cell.commit()
            except Exception as e:
                logger.error(f"Value change listener failed while committing {cell!r}: {e}", exc_info=True)
                errors.append(e)
        return errors

    def _rollback_cells(self, cells: list[TransactionalCell]) -> list[Exception]:
        errors = []
        for cell in cells:
            try:
                cell.rollback()
            except Exception as e:
                logger.error(f"Rollback failed for {cell!r}: {e}", exc_info=True)
                errors.append(e)
        return errors

    def _cells(self) -> list[TransactionalCell]:
        return [binding.cell for binding in self._bindings.values() if binding.cell is not None]

    def _configure_all(self) -> None:
        state = self._group_state()
        for binding in list(self._bindings.values()):
            binding.configure(state)

    def _group_state(self) -> GroupState:
        return GroupState(buffered=self._buffered, enabled=self._enabled, read_only=self._read_only)

    def _ensure_idle(self, action: str) -> None:
        if self._state is not CommitState.IDLE:
            raise BindingError(f"Cannot {action} while the group is {self._state.value}")

    def __repr__(self) -> str:
        return f"BindingGroup(slots={self.slot_names!r}, buffered={self._buffered})"


def caption_for_slot(slot_name: str) -> str:
    """Derive a human readable caption from a slot name."""
    words = slot_name.replace("-", " ").replace("_", " ").split()
    return " ".join(words).capitalize()

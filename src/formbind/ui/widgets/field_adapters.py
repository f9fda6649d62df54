"""
Qt widget adapters for the binding layer.

Each adapter wraps a Qt input widget and implements the Field interface, so
the widget can be bound to a record slot with BindingGroup.bind().
"""

from typing import Any, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QCheckBox, QDoubleSpinBox, QLineEdit, QSpinBox, QWidget

from formbind.core.cells import ValueChangeEvent
from formbind.core.errors import ReadOnlyViolation
from formbind.core.fields import Field, FieldFactory
from formbind.core.transactional import TransactionalCell
from formbind.infrastructure.logging_config import get_logger


logger = get_logger(__name__)


class QtField(Field):
    """
    Base adapter between a Qt widget and a TransactionalCell.

    User edits are written to the value source as they happen. Notifications
    from the source (external changes, commits) update the widget. Subclasses
    provide the widget-specific reading, writing and edit signal.
    """

    def __init__(self, widget: QWidget, caption: str = ""):
        super().__init__(caption)
        self.widget = widget
        self._source: Optional[TransactionalCell] = None
        self._read_only = False
        self._read_through = True
        self._write_through = True
        self._updating = False
        self._connect_edit_signal()

    def _connect_edit_signal(self):
        raise NotImplementedError("Subclasses must implement _connect_edit_signal()")

    def _read_widget(self) -> Any:
        raise NotImplementedError("Subclasses must implement _read_widget()")

    def _write_widget(self, value: Any):
        raise NotImplementedError("Subclasses must implement _write_widget()")

    def _apply_read_only(self, read_only: bool):
        self.widget.setReadOnly(read_only)

    def set_value_source(self, cell: Optional[TransactionalCell]):
        if self._source is not None:
            self._source.remove_listener(self._on_source_changed)
        self._source = cell
        if cell is not None:
            cell.add_listener(self._on_source_changed)
        self.discard()

    def get_value_source(self) -> Optional[TransactionalCell]:
        return self._source

    def get_value(self) -> Any:
        if self._source is not None:
            return self._source.get_value()
        return self._read_widget()

    def set_value(self, value: Any):
        """
        Set the value as if the user had typed it.

        Raises:
            ReadOnlyViolation: If the field is disabled or read-only, or the
                bound slot refuses the write. The widget is restored first.
        """
        if not self.is_enabled() or self.is_read_only():
            raise ReadOnlyViolation(f"Field '{self.caption}' does not accept input")
        self._show(value)
        try:
            self._push(value)
        except ReadOnlyViolation:
            self.discard()
            raise

    def set_enabled(self, enabled: bool):
        self.widget.setEnabled(enabled)

    def is_enabled(self) -> bool:
        return self.widget.isEnabled()

    def set_read_only(self, read_only: bool):
        self._read_only = bool(read_only)
        self._apply_read_only(self._read_only)

    def is_read_only(self) -> bool:
        return self._read_only

    def set_read_through(self, read_through: bool):
        self._read_through = bool(read_through)

    def set_write_through(self, write_through: bool):
        self._write_through = bool(write_through)

    def is_write_through(self) -> bool:
        return self._write_through

    def discard(self):
        """Show the source's value, or clear the widget when there is no source."""
        self._show(self._source.get_value() if self._source is not None else None)

    def _on_widget_edited(self, *args):
        if self._updating:
            return
        try:
            self._push(self._read_widget())
        except ReadOnlyViolation as e:
            logger.warning(f"Edit of '{self.caption}' rejected: {e}")
            self.discard()

    def _on_source_changed(self, event: ValueChangeEvent):
        self._show(event.value)

    def _push(self, value: Any):
        if self._source is not None:
            self._source.set_value(value)

    def _show(self, value: Any):
        self._updating = True
        try:
            self._write_widget(value)
        finally:
            self._updating = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(caption={self.caption!r})"


class LineEditField(QtField):
    """Text field backed by a QLineEdit."""

    def __init__(self, caption: str = "", widget: Optional[QLineEdit] = None):
        super().__init__(widget or QLineEdit(), caption)

    def _connect_edit_signal(self):
        self.widget.textEdited.connect(self._on_widget_edited)

    def _read_widget(self) -> str:
        return self.widget.text()

    def _write_widget(self, value: Any):
        self.widget.setText("" if value is None else str(value))


class SpinBoxField(QtField):
    """Integer field backed by a QSpinBox."""

    def __init__(self, caption: str = "", widget: Optional[QSpinBox] = None):
        if widget is None:
            widget = QSpinBox()
            widget.setRange(-2**31, 2**31 - 1)
        super().__init__(widget, caption)

    def _connect_edit_signal(self):
        self.widget.valueChanged.connect(self._on_widget_edited)

    def _read_widget(self) -> int:
        return self.widget.value()

    def _write_widget(self, value: Any):
        self.widget.setValue(int(value) if value is not None else 0)


class DoubleSpinBoxField(QtField):
    """Floating point field backed by a QDoubleSpinBox."""

    def __init__(self, caption: str = "", widget: Optional[QDoubleSpinBox] = None, decimals: int = 2):
        if widget is None:
            widget = QDoubleSpinBox()
            widget.setRange(-1e9, 1e9)
            widget.setDecimals(decimals)
        super().__init__(widget, caption)

    def _connect_edit_signal(self):
        self.widget.valueChanged.connect(self._on_widget_edited)

    def _read_widget(self) -> float:
        return self.widget.value()

    def _write_widget(self, value: Any):
        self.widget.setValue(float(value) if value is not None else 0.0)


class CheckBoxField(QtField):
    """Boolean field backed by a QCheckBox."""

    def __init__(self, caption: str = "", widget: Optional[QCheckBox] = None):
        super().__init__(widget or QCheckBox(), caption)

    def _connect_edit_signal(self):
        self.widget.toggled.connect(self._on_widget_edited)

    def _read_widget(self) -> bool:
        return self.widget.isChecked()

    def _write_widget(self, value: Any):
        self.widget.setChecked(bool(value))

    def _apply_read_only(self, read_only: bool):
        # QCheckBox has no read-only mode; ignore input instead of disabling
        self.widget.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, read_only)
        self.widget.setFocusPolicy(Qt.FocusPolicy.NoFocus if read_only else Qt.FocusPolicy.StrongFocus)


class QtFieldFactory(FieldFactory):
    """Creates the Qt adapter matching a slot's type."""

    def create_field(self, value_type: type, caption: str = "") -> QtField:
        if isinstance(value_type, type):
            # bool is a subclass of int, so it must be checked first
            if issubclass(value_type, bool):
                return CheckBoxField(caption)
            if issubclass(value_type, int):
                return SpinBoxField(caption)
            if issubclass(value_type, float):
                return DoubleSpinBoxField(caption)
        return LineEditField(caption)

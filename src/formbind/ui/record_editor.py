"""
Record editor dialog.

Builds a form with one Qt field per record slot, bound through a
BindingGroup, with buttons to commit or discard the pending edits and
switches for the group's buffered, enabled and read-only flags.
"""

from typing import Any

from PySide6.QtCore import Slot
from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
)

from formbind.core.errors import CommitAborted, FieldValidationError
from formbind.core.group import BindingGroup, CommitEvent, CommitHandler
from formbind.infrastructure.logging_config import get_logger
from formbind.ui.widgets.field_adapters import QtFieldFactory


logger = get_logger(__name__)


class StatusCommitHandler(CommitHandler):
    """Reports the outcome of each commit on the dialog's status line."""

    def __init__(self, dialog: "RecordEditorDialog"):
        self._dialog = dialog

    def post_commit(self, event: CommitEvent) -> None:
        count = len(event.group)
        self._dialog.show_status(f"Committed {count} field(s)")


class RecordEditorDialog(QDialog):
    """
    Dialog editing every slot of a record.

    The group is exposed as the `group` attribute so callers can register
    extra commit handlers or validators before showing the dialog.
    """

    def __init__(self, record: Any, buffered: bool = True, parent=None):
        """
        Initialize the dialog.

        Args:
            record: Record exposing get_slot() and slot_names().
            buffered: Initial buffered flag of the binding group.
            parent: Parent widget.
        """
        super().__init__(parent)

        self.group = BindingGroup(record, buffered=buffered)
        factory = QtFieldFactory()
        for slot_name in record.slot_names():
            self.group.build_and_bind(slot_name, factory)
        self.group.add_commit_handler(StatusCommitHandler(self))

        self._setup_ui()
        self._connect_signals()

        logger.debug(f"RecordEditorDialog initialized with slots: {', '.join(self.group.slot_names)}")

    def _setup_ui(self):
        """Setup the user interface."""
        self.setWindowTitle("Edit record")

        layout = QVBoxLayout(self)

        form = QFormLayout()
        for field in self.group.fields:
            form.addRow(field.caption, field.widget)
        layout.addLayout(form)

        options = QHBoxLayout()
        self.checkBuffered = QCheckBox("Buffered")
        self.checkBuffered.setChecked(self.group.buffered)
        self.checkEnabled = QCheckBox("Enabled")
        self.checkEnabled.setChecked(self.group.enabled)
        self.checkReadOnly = QCheckBox("Read-only")
        self.checkReadOnly.setChecked(self.group.read_only)
        options.addWidget(self.checkBuffered)
        options.addWidget(self.checkEnabled)
        options.addWidget(self.checkReadOnly)
        layout.addLayout(options)

        self.labelStatus = QLabel("")
        layout.addWidget(self.labelStatus)

        buttons = QHBoxLayout()
        self.btnCommit = QPushButton("Commit")
        self.btnDiscard = QPushButton("Discard")
        self.btnClose = QPushButton("Close")
        buttons.addStretch()
        buttons.addWidget(self.btnCommit)
        buttons.addWidget(self.btnDiscard)
        buttons.addWidget(self.btnClose)
        layout.addLayout(buttons)

    def _connect_signals(self):
        """Connect UI signals to slots."""
        self.btnCommit.clicked.connect(self._on_commit)
        self.btnDiscard.clicked.connect(self._on_discard)
        self.btnClose.clicked.connect(self._on_close)
        self.checkBuffered.toggled.connect(self._on_buffered_toggled)
        self.checkEnabled.toggled.connect(self._on_enabled_toggled)
        self.checkReadOnly.toggled.connect(self._on_read_only_toggled)

    def show_status(self, message: str):
        self.labelStatus.setText(message)

    @Slot()
    def _on_commit(self):
        """Commit the pending edits, reporting failures to the user."""
        try:
            self.group.commit()
        except FieldValidationError as e:
            lines = [f"{name}: {error}" for name, error in e.invalid_fields.items()]
            QMessageBox.warning(self, "Invalid values", "\n".join(lines))
        except CommitAborted as e:
            logger.error(f"Commit failed: {e.reason}", exc_info=True)
            QMessageBox.critical(self, "Commit failed", e.reason)

    @Slot()
    def _on_discard(self):
        self.group.discard()
        self.show_status("Changes discarded")

    @Slot()
    def _on_close(self):
        if self.group.is_modified():
            reply = QMessageBox.question(
                self,
                "Uncommitted changes",
                "Discard uncommitted changes?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
            )
            if reply != QMessageBox.StandardButton.Yes:
                return
            self.group.discard()
        self.accept()

    @Slot(bool)
    def _on_buffered_toggled(self, checked: bool):
        self.group.buffered = checked

    @Slot(bool)
    def _on_enabled_toggled(self, checked: bool):
        self.group.enabled = checked

    @Slot(bool)
    def _on_read_only_toggled(self, checked: bool):
        self.group.read_only = checked

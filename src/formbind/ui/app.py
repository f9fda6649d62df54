"""
Demo application entry point.

This module opens a record editor for a sample record using PySide6.
"""

import argparse
import sys
from dataclasses import dataclass

from PySide6.QtWidgets import QApplication
from qt_material import apply_stylesheet

from formbind import __version__
from formbind.config.settings import get_settings
from formbind.core.records import ObjectRecord
from formbind.core.validation import in_range, matches
from formbind.infrastructure.logging_config import setup_logging, get_logger
from formbind.ui.record_editor import RecordEditorDialog


logger = get_logger(__name__)


@dataclass
class Person:
    """Sample record edited by the demo."""

    member_id: str = "M-0001"
    name: str = "Ada Lovelace"
    email: str = "ada@example.org"
    age: int = 36
    height: float = 1.65
    newsletter: bool = True


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formbind-demo",
        description="Edit a sample record through a buffered binding group"
    )
    parser.add_argument("--version", action="version", version=f"formbind {__version__}")
    parser.add_argument("--unbuffered", action="store_true", help="Announce edits immediately")
    parser.add_argument("--theme", help="qt_material theme file (e.g. light_blue.xml)")
    return parser


def main(argv=None):
    """
    Main entry point for the demo application.
    """
    args = create_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file_path,
        log_to_file=settings.log_to_file
    )

    logger.info("Starting formbind demo")

    app = QApplication(sys.argv[:1])
    app.setApplicationName("formbind")
    app.setApplicationVersion(__version__)
    apply_stylesheet(app, theme=args.theme or settings.theme)

    person = Person()
    record = ObjectRecord(person, read_only=("member_id",))
    buffered = settings.buffered_by_default and not args.unbuffered

    dialog = RecordEditorDialog(record, buffered=buffered)
    dialog.resize(settings.window_width, settings.window_height)

    name_field = dialog.group.get_field("name")
    name_field.required = True
    dialog.group.get_field("email").add_validator(
        matches(r"[^@\s]+@[^@\s]+", "Not an e-mail address")
    )
    dialog.group.get_field("age").add_validator(in_range(0, 150))

    dialog.show()
    exit_code = app.exec()

    logger.info(f"Demo exiting with code {exit_code}, record is now {person}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())

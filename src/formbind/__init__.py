"""
formbind - buffered, transactional binding between input widgets and records.

This package lets a form edit several fields of a record locally and apply
all of the edits as a single all-or-nothing commit.
"""

__version__ = "0.1.0"

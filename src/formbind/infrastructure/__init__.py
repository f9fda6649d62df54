"""
Infrastructure layer package.

This package contains modules for interacting with the outside world:
- Persistent data locations
- Logging configuration

Modules here must not import GUI frameworks (PySide6, Qt, etc.).
"""

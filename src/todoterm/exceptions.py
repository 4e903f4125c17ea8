# exceptions.py


class TodoTermError(Exception):
    """Base class for errors raised by todoterm."""


class ValidationError(TodoTermError):
    """User input (repeat rule, date, key name, form field) could not be accepted."""


class StorageError(TodoTermError):
    """The task file or the settings file could not be read or written."""

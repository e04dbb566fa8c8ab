"""
Fatal errors raised while configuring or running a mocker.

Malformed user input is never raised; it is reported on the console and the
field is prompted again.
"""


class MockerError(Exception):
    """Base exception for failures that abort the whole run."""
    pass


class UnsupportedFieldError(MockerError):
    """Raised when a field kind cannot be generated."""
    pass


class SchemaError(MockerError):
    """Raised when the record schema cannot be read or understood."""
    pass


class InputExhaustedError(MockerError):
    """Raised when the line source ends before a field is configured."""
    pass


class GenerationError(MockerError):
    """Raised when a generated value does not fit its field."""
    pass


class SettingsError(MockerError):
    """Raised when a settings file cannot be read."""
    pass

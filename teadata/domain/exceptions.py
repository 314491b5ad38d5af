"""Domain-specific exceptions."""


class TeaDataError(Exception):
    """Base exception for all tea data errors."""

    pass


class ValidationError(TeaDataError, ValueError):
    """Raised when a tea variety fails domain validation."""

    pass


class EmptyNameError(ValidationError):
    """Raised when a tea variety has no name after trimming."""

    pass


class SteepTimeOutOfRangeError(ValidationError):
    """Raised when a steep time is outside the allowed window."""

    pass


class SteepTimeParseError(ValidationError):
    """Raised when a steep time cannot be parsed from text."""

    pass


class ArgumentError(TeaDataError, ValueError):
    """Raised when an operation receives an unusable argument."""

    def __init__(self, param_name: str, message: str):
        super().__init__(message)
        self.param_name = param_name


class NotFoundError(TeaDataError):
    """Raised when a tea variety does not exist in the store."""

    pass


class ConflictError(TeaDataError):
    """Raised when an operation would break a store-level rule."""

    pass


class StorageError(TeaDataError):
    """Raised when the embedded store engine reports a failure.

    Carries the SQLite primary result code and, when the engine reports one,
    the extended result code (e.g. 19 / 2067 for a UNIQUE constraint).
    """

    def __init__(
        self,
        message: str,
        primary_code: int | None = None,
        extended_code: int | None = None,
    ):
        super().__init__(message)
        self.primary_code = primary_code
        self.extended_code = extended_code


class TransportError(TeaDataError):
    """Raised when a request to the tea API fails.

    ``status_code`` is None for failures that never produced a response.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

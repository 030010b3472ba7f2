"""Exception classes for the minidream core module."""


class MiniDreamError(Exception):
    """Base exception for all minidream errors."""


class ConfigError(MiniDreamError):
    """Raised when a rule, filter or column references a field absent from the schema."""

    def __init__(self, message: str | None = None, field: str | None = None) -> None:
        if message is None:
            message = f"Unknown field: {field}" if field else "Invalid configuration"
        super().__init__(message)
        self.field = field


class ValidationError(MiniDreamError):
    """Raised when a prediction record answer is missing, empty or malformed."""

    def __init__(self, field: str | None = None, reason: str | None = None) -> None:
        if field and reason:
            msg = f"Invalid answer for {field!r}: {reason}"
        elif field:
            msg = f"Missing required answer: {field!r}"
        else:
            msg = "Invalid prediction record"
        super().__init__(msg)
        self.field = field
        self.reason = reason


class SubmissionError(MiniDreamError):
    """Raised when the external submission call fails."""

    def __init__(self, message: str | None = None, cause: BaseException | None = None) -> None:
        if message is None:
            message = f"Submission failed: {cause}" if cause else "Submission failed"
        super().__init__(message)
        self.cause = cause

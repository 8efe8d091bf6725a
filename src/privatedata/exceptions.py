"""Custom exceptions for privatedata."""


class PrivateDataError(Exception):
    """Base exception for all privatedata errors."""


class ConfigurationError(PrivateDataError):
    """Configuration or environment variable error."""


class InputFileError(PrivateDataError):
    """Pipeline input file is missing or malformed."""


class UnipileAPIError(PrivateDataError):
    """Error from the Unipile API."""

    def __init__(self, status_code: int, message: str, identifier: str | None = None):
        self.status_code = status_code
        self.identifier = identifier
        super().__init__(f"Unipile API error ({status_code}): {message}")


class RateLimitError(UnipileAPIError):
    """Rate limit exceeded error."""

    def __init__(self, retry_after: int | None = None, identifier: str | None = None):
        self.retry_after = retry_after
        message = f"Rate limited (retry after {retry_after}s)" if retry_after else "Rate limited"
        super().__init__(429, message, identifier)


class MetadataError(PrivateDataError):
    """Note metadata cannot be turned into keyed entries."""


class NoteConversionError(PrivateDataError):
    """Error converting a specific note."""

    def __init__(self, note_name: str, original_error: Exception):
        self.note_name = note_name
        self.original_error = original_error
        super().__init__(f"Failed to convert '{note_name}': {original_error}")

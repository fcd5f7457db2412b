"""Custom exceptions for Press Import.

This module defines the exception hierarchy for input validation, run
configuration, per-file adapter failures and content store API interactions.
"""

from pathlib import Path


class PressImportError(Exception):
    """Base exception for all Press Import errors."""

    pass


class InvalidInputError(PressImportError, ValueError):
    """Raised when a path or URL cannot be turned into a content key.

    Fatal to the single path construction; the importer reports the row as
    failed and the run continues.
    """

    pass


class UnsupportedCapabilityError(PressImportError):
    """Raised when a row needs a metadata mapping but no strategy is configured."""

    pass


class ConfigurationError(PressImportError):
    """Raised when configuration is invalid or missing.

    Configuration errors abort the run before any file is processed.
    """

    pass


class InvalidPathError(ConfigurationError):
    """Raised when the input directory is missing or unreadable."""

    pass


class UnsupportedTypeError(ConfigurationError):
    """Raised when no importer is registered for the requested entity type."""

    pass


class UnsupportedSourceError(ConfigurationError):
    """Raised when no source adapter is registered for the requested source."""

    pass


class NoFilesFoundError(ConfigurationError):
    """Raised when discovery finds no importable files."""

    pass


class SourceAdapterError(PressImportError):
    """Raised when a source file cannot be read or processed.

    Aborts the remaining rows of that file only.
    """

    def __init__(self, message: str, file_path: str | Path | None = None):
        """Initialize source adapter error.

        Args:
            message: Error message
            file_path: File being processed when the error occurred
        """
        self.message = message
        self.file_path = str(file_path) if file_path is not None else None
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with the offending file."""
        if self.file_path:
            return f"{self.file_path}: {self.message}"
        return self.message


class APIError(PressImportError):
    """Base class for content store API errors."""

    def __init__(self, message: str, status_code: int | None = None, response: dict | None = None):
        """Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response: API response body
        """
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with status code and response."""
        msg = self.message
        if self.status_code:
            msg = f"[{self.status_code}] {msg}"
        if self.response:
            msg = f"{msg}: {self.response}"
        return msg


class AuthenticationError(APIError):
    """Raised when authentication fails (401 Unauthorized)."""

    pass


class AuthorizationError(APIError):
    """Raised when authorization fails (403 Forbidden)."""

    pass


class NotFoundError(APIError):
    """Raised when a resource is not found (404 Not Found)."""

    pass


class ConflictError(APIError):
    """Raised when a resource conflict occurs (409 Conflict, duplicate slug or login)."""

    pass


class RateLimitError(APIError):
    """Raised when API rate limit is exceeded (429 Too Many Requests)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: dict | None = None,
        retry_after: int | None = None,
    ):
        """Initialize rate limit error.

        Args:
            message: Error message
            status_code: HTTP status code
            response: API response body
            retry_after: Seconds to wait before retrying (from Retry-After header)
        """
        super().__init__(message, status_code, response)
        self.retry_after = retry_after


class ServerError(APIError):
    """Raised when server returns 5xx error."""

    pass


class NetworkError(PressImportError):
    """Raised when network-related errors occur (timeouts, connection failures)."""

    pass

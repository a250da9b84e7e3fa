"""Custom exceptions for the pipeline."""


class PipelineError(Exception):
    """Base exception for pipeline errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class AuthError(PipelineError):
    """Raised when no usable HH.ru token is available.

    The current tick is aborted and retried on the next one.
    """

    def __init__(self, detail: str = "Authentication failed"):
        self.detail = detail
        super().__init__(detail)


class PlatformError(PipelineError):
    """Raised when an HH.ru API request fails or returns garbage."""

    def __init__(
        self, status_code: int, message: str, response_data: dict | None = None
    ):
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message)


class OracleError(PipelineError):
    """Raised when the language model fails or breaks its output contract."""


class PersistenceError(PipelineError):
    """Raised when the database rejects a read or write."""

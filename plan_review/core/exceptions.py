class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error

class DocumentFetchError(AppError):
    """Raised when the submitted document cannot be retrieved from storage."""
    pass

class DocumentParseError(AppError):
    """Raised when the input bytes are not a readable PDF document."""
    pass

class ChunkSerializationError(AppError):
    """Raised when a page range cannot be written out as a standalone PDF."""
    def __init__(self, start_page: int, end_page: int, original_error: Exception = None):
        super().__init__(
            f"Failed to serialize pages {start_page}-{end_page} as a standalone document",
            original_error=original_error,
        )
        self.start_page = start_page
        self.end_page = end_page

class ChunkExtractionError(AppError):
    """Raised when metadata cannot be extracted from a single chunk."""
    pass

class ModelResponseParseError(AppError):
    """Raised when reasoning service output cannot be decoded as a JSON object."""
    pass

class ResponseValidationError(AppError):
    """Raised when a decoded review payload is missing required fields."""
    pass

class APIClientError(AppError):
    """Raised when an external API call fails."""
    pass

class APITimeoutError(APIClientError):
    """Raised when an external API call times out."""
    pass

class RetriesExhaustedError(AppError):
    """Raised internally when every attempt of a wrapped call failed."""
    def __init__(self, attempts: int, last_error: Exception = None):
        super().__init__(f"All {attempts} attempts failed", original_error=last_error)
        self.attempts = attempts

class MailDispatchError(AppError):
    """Raised when the mail transport rejects or fails to send a message."""
    pass

class InvalidStatusTransitionError(AppError):
    """Raised when a submission status change is not allowed."""
    pass

class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass

"""Error types raised by the analysis services.

Each error carries the HTTP status the routes translate it into.
"""


class ImageNamerError(Exception):
    """Base error for the image analysis service."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ImageNamerError):
    """Rejected upload or request parameter; nothing was queued."""

    status_code = 400


class NotFoundError(ImageNamerError):
    """Unknown job id or record key."""

    status_code = 404


class ConflictError(ImageNamerError):
    """Operation not allowed in the job's current state."""

    status_code = 409


class ExternalApiError(ImageNamerError):
    """A provider call failed or returned an unusable body."""

    status_code = 502

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"{provider} request failed: {message}")


class JobProcessingError(ImageNamerError):
    """A job could not be processed outside of the per-image boundary."""

    status_code = 500

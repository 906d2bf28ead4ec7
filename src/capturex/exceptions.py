"""Error taxonomy for the capture/upload workflow.

None of these escape a session event handler: the upload controller turns
them into ``UploadFailure`` outcomes and rejections stay on the session.
"""

from __future__ import annotations


class CaptureError(Exception):
    """Base class for all CaptureX errors."""


class ValidationError(CaptureError):
    """The selected input is not an image."""


class TransportError(CaptureError):
    """The request could not be sent or no response was received."""


class ResponseStatusError(CaptureError):
    """The service answered with a non-success status."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        detail = f"HTTP {status_code} {reason}".rstrip()
        super().__init__(f"Upload failed: {detail}")


class MalformedResponseError(CaptureError):
    """The response body is not the structured data the service promises."""

    def __init__(self, message: str = "malformed response") -> None:
        super().__init__(message)


class ProcessingError(CaptureError):
    """The service accepted the upload but reported processing_success=false."""


class PickerError(CaptureError):
    """The picker failed before returning a file."""


class PreviewError(CaptureError):
    """A preview could not be allocated for a valid image."""

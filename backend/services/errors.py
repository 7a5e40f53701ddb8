"""
Error taxonomy for the capture pipeline.
None of these are retried; each one aborts the request.
"""


class CaptureError(Exception):
    """Base class. The message is shown to the caller as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CaptureError):
    """Missing or malformed request input (raised before any browser work)."""


class NavigationFailure(CaptureError):
    """Target unreachable or navigation timed out."""


class StabilizationFailure(CaptureError):
    """Page script environment inaccessible or a mutation was rejected."""


class CaptureFailure(CaptureError):
    """A raster capture call failed (e.g. session torn down mid-capture)."""


class AssemblyFailure(CaptureError):
    """Frames could not be assembled into a document."""

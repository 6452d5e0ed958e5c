"""Exception types raised inside the app. None of them escape analyze()."""
from vision_glasses.constants import MSG_SERVER_ERROR


class VisionGlassesError(Exception):
    """Base for app-specific errors."""


class EndpointError(VisionGlassesError):
    """The live endpoint answered with a non-2xx status."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(MSG_SERVER_ERROR % (status, body))

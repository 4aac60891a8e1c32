"""Exception types raised by the try-on studio."""


class TryOnStudioError(Exception):
    """Base class for all studio errors."""


class ReadError(TryOnStudioError):
    """A local file or upload could not be read."""


class MalformedImageError(TryOnStudioError, ValueError):
    """An encoded image is not a `data:<mime>;base64,<payload>` URI."""


class RemoteCallError(TryOnStudioError):
    """Transport or model-side failure while calling the image model."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

"""Exception types raised by the GhibliX core."""


class GhiblixError(Exception):
    """Base class for all GhibliX errors."""


class InvalidApiKeyError(GhiblixError):
    """The API key is missing or does not have the expected shape.

    Raised before any network call is attempted.
    """


class GenerationError(GhiblixError):
    """The image service rejected the request or could not be reached.

    The message is suitable for showing to the user directly.

    Attributes:
        status_code: HTTP status returned by the service, or None when the
            request never produced a response
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResultParseError(GenerationError):
    """The service answered successfully but no image could be found."""

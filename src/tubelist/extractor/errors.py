"""Exceptions raised while extracting data from YouTube responses."""


class ExtractionError(Exception):
    """Base class for all extraction failures."""


class ParsingError(ExtractionError):
    """A response could not be turned into the expected data."""


class InvalidResponseError(ParsingError):
    """The response body is too short, not JSON, or has the wrong envelope."""


class SchemaMismatchError(ParsingError):
    """A structural element that should always exist is missing."""


class FieldExtractionError(ParsingError):
    """A specific field could not be located or parsed.

    Attributes:
        field: Human-readable name of the field, e.g. ``"channel id"``.
        cause: The underlying failure, also chained as ``__cause__``.
    """

    def __init__(self, field: str, cause: BaseException | None = None) -> None:
        self.field = field
        self.cause = cause
        message = f"Could not get {field}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.__cause__ = cause


class InvalidPageUrlError(ExtractionError, ValueError):
    """``get_page`` was called without a page URL."""

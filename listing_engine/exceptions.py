# listing_engine/exceptions.py

"""Exception hierarchy and the error-state channel handed to presenters."""

from dataclasses import dataclass
from enum import Enum


class ListingEngineError(Exception):
    """Base class for every error raised by listing_engine."""


class InvalidQueryError(ListingEngineError, ValueError):
    """A search query was empty or malformed."""


class InvalidRangeError(ListingEngineError, ValueError):
    """A price range had ``min > max`` or non-numeric bounds."""


class PersistenceCorruptionError(ListingEngineError):
    """A persisted slot held content that could not be parsed."""


class TransportError(ListingEngineError):
    """An external marketplace search failed in transit."""


class NotFoundError(ListingEngineError, LookupError):
    """A requested listing does not resolve to any source record."""


class ErrorType(str, Enum):
    """Failure classes surfaced to the presentation layer."""

    NETWORK = "NETWORK"
    NOT_FOUND = "NOT_FOUND"
    GENERIC = "GENERIC"


@dataclass(frozen=True)
class ErrorState:
    """A classified failure: what went wrong and what to tell the user."""

    type: ErrorType
    message: str

    @property
    def retryable(self) -> bool:
        """Only network failures are worth offering a retry for."""
        return self.type is ErrorType.NETWORK


NETWORK_MESSAGE = "Please check your internet connection and try again."
NOT_FOUND_MESSAGE = "Listing not found"
GENERIC_MESSAGE = "Something went wrong"


def classify_error(exc: BaseException) -> ErrorState:
    """Map an exception onto the ``{type, message}`` error channel."""
    if isinstance(exc, (TransportError, ConnectionError, TimeoutError)):
        return ErrorState(ErrorType.NETWORK, NETWORK_MESSAGE)
    if isinstance(exc, NotFoundError):
        return ErrorState(
            ErrorType.NOT_FOUND, str(exc) or NOT_FOUND_MESSAGE
        )
    return ErrorState(ErrorType.GENERIC, str(exc) or GENERIC_MESSAGE)

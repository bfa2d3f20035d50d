import logging

import httpx

logger = logging.getLogger(__name__)


class CoverSnapError(Exception):
    """Base of the user-facing error taxonomy."""

    message = "Failed to extract image. Please check the link or try another platform."

    def __init__(self, message: str = ""):
        super().__init__(message or self.message)


class EmptyInput(CoverSnapError):
    message = "Please provide a valid URL"


class InvalidURL(CoverSnapError):
    message = "Invalid URL format"


class NetworkError(CoverSnapError):
    message = "Network error: Unable to connect to the page. Please check the link."


class NoCoverFound(CoverSnapError):
    message = "No cover image detected on this page."


class UnknownFailure(CoverSnapError):
    pass


class StrategyError(Exception):
    """A single relay attempt produced no usable payload."""


class AllStrategiesFailed(Exception):
    def __init__(self, errors: list[tuple[str, Exception]]):
        self.errors = errors
        detail = "; ".join(f"{name}: {exc}" for name, exc in errors) or "no strategies"
        super().__init__(f"all strategies failed ({detail})")


def _is_network_status(status: int) -> bool:
    return status == 403 or status >= 500


def classify_error(exc: BaseException) -> CoverSnapError:
    """Map any internal failure onto exactly one taxonomy error."""
    if isinstance(exc, CoverSnapError):
        return exc
    if isinstance(exc, AllStrategiesFailed):
        return NetworkError()
    if isinstance(exc, httpx.HTTPStatusError):
        if _is_network_status(exc.response.status_code):
            return NetworkError()
        return UnknownFailure()
    if isinstance(exc, (httpx.HTTPError, httpx.InvalidURL)):
        return NetworkError()
    logger.debug(f"Unclassified failure: {exc!r}")
    return UnknownFailure()

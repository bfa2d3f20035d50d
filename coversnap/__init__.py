__version__ = "1.0.0"

from .core import download_asset, extract
from .errors import (
    CoverSnapError,
    EmptyInput,
    InvalidURL,
    NetworkError,
    NoCoverFound,
    UnknownFailure,
    classify_error,
)
from .history import HistoryStore
from .models import DEFAULT_TITLE, AssetDownload, ExtractionResult, OpenExternally, Platform
from .platforms import detect_platform
from .urls import normalize_url, resolve_cover_url

__all__ = [
    "__version__",
    "extract",
    "download_asset",
    "CoverSnapError",
    "EmptyInput",
    "InvalidURL",
    "NetworkError",
    "NoCoverFound",
    "UnknownFailure",
    "classify_error",
    "HistoryStore",
    "DEFAULT_TITLE",
    "AssetDownload",
    "ExtractionResult",
    "OpenExternally",
    "Platform",
    "detect_platform",
    "normalize_url",
    "resolve_cover_url",
]

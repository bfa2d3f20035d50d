import logging
import os
import time

import httpx

from .errors import AllStrategiesFailed, StrategyError
from .http import Strategy, _encode, _get, run_strategies
from .models import AssetDownload, OpenExternally

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = float(os.getenv("COVERSNAP_DOWNLOAD_TIMEOUT", "15.0"))

DEFAULT_EXTENSION = "jpg"

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/pjpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/avif": "avif",
    "image/bmp": "bmp",
    "image/svg+xml": "svg",
}

# Relays answer failures with an error page rather than a status code.
_REJECTED_TYPES = ("text/html", "application/json", "text/plain")


def _mime(content_type: str) -> str:
    return (content_type or "").split(";")[0].strip().lower()


def guess_extension(content_type: str) -> str:
    return EXTENSIONS.get(_mime(content_type), DEFAULT_EXTENSION)


def suggest_filename(extension: str = DEFAULT_EXTENSION) -> str:
    return f"cover-snap-{int(time.time() * 1000)}.{extension}"


def _asset(resp: httpx.Response) -> tuple[bytes, str]:
    content_type = resp.headers.get("content-type", "")
    if _mime(content_type) in _REJECTED_TYPES:
        raise StrategyError(f"relay returned {_mime(content_type)} instead of an image")
    if not resp.content:
        raise StrategyError("empty body")
    return resp.content, content_type


# ─── 下载策略 ──────────────────────────────────────────────────────────────────

def _allorigins_raw(client: httpx.Client, url: str, timeout: float):
    return _asset(_get(client, f"https://api.allorigins.win/raw?url={_encode(url)}", timeout))


def _corsproxy_raw(client: httpx.Client, url: str, timeout: float):
    return _asset(_get(client, f"https://corsproxy.io/?{_encode(url)}", timeout))


def _wsrv_raw(client: httpx.Client, url: str, timeout: float):
    return _asset(_get(client, f"https://wsrv.nl/?url={_encode(url)}", timeout))


ASSET_STRATEGIES: tuple[Strategy, ...] = (
    Strategy("allorigins-raw", _allorigins_raw, DOWNLOAD_TIMEOUT),
    Strategy("corsproxy", _corsproxy_raw, DOWNLOAD_TIMEOUT),
    Strategy("wsrv", _wsrv_raw, DOWNLOAD_TIMEOUT),
)


def retrieve_asset(cover_url: str, strategies=ASSET_STRATEGIES):
    """Fetch image bytes through the relay chain.

    Returns AssetDownload on the first success, or OpenExternally when every
    relay failed so the caller can hand the URL to a browser instead.
    """
    try:
        name, (content, content_type) = run_strategies(strategies, cover_url, label="asset")
    except AllStrategiesFailed as e:
        logger.warning(f"Asset download failed, open externally: {cover_url} ({e})")
        return OpenExternally(url=cover_url)
    ext = guess_extension(content_type)
    logger.info(f"Downloaded {len(content)} bytes via {name} ({content_type or 'unknown type'})")
    return AssetDownload(content=content, extension=ext, content_type=_mime(content_type), strategy=name)

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Callable
from urllib.parse import quote

import httpx

from .errors import AllStrategiesFailed, NetworkError, StrategyError

logger = logging.getLogger(__name__)

DESKTOP_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/125.0.0.0 Safari/537.36"
)

TIMEOUT = float(os.getenv("COVERSNAP_TIMEOUT", "10.0"))
SLOW_TIMEOUT = float(os.getenv("COVERSNAP_SLOW_TIMEOUT", "15.0"))

NETWORK_EXCEPTIONS = (
    httpx.HTTPError,
    httpx.TimeoutException,
    httpx.InvalidURL,
)

PARSE_EXCEPTIONS = (
    json.JSONDecodeError,
    ValueError,
    KeyError,
    TypeError,
)

HANDLED_EXCEPTIONS = NETWORK_EXCEPTIONS + PARSE_EXCEPTIONS + (StrategyError,)


def _headers() -> dict[str, str]:
    return {
        "User-Agent": DESKTOP_UA,
        "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
    }


def _client() -> httpx.Client:
    return httpx.Client(follow_redirects=True, timeout=TIMEOUT, headers=_headers())


def _encode(url: str) -> str:
    return quote(url, safe="")


# ─── 回退链 ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Strategy:
    """One relay in a fallback chain.

    ``fetch(client, target_url, timeout)`` returns the payload or raises; any
    exception in HANDLED_EXCEPTIONS counts as a failed attempt.
    """

    name: str
    fetch: Callable[[httpx.Client, str, float], object]
    timeout: float = TIMEOUT


def run_strategies(strategies, target_url: str, label: str = "fetch"):
    """Try ``strategies`` in order, one at a time, returning ``(name, payload)`` of the first success.

    Each attempt gets its own timeout; a failed or timed-out attempt is logged
    and the next strategy is tried. Raises AllStrategiesFailed when the chain
    is exhausted.
    """
    errors: list[tuple[str, Exception]] = []
    client = _client()
    try:
        for strategy in strategies:
            started = time.monotonic()
            try:
                payload = strategy.fetch(client, target_url, strategy.timeout)
            except HANDLED_EXCEPTIONS as e:
                logger.warning(f"{label} via {strategy.name} failed: {e}")
                errors.append((strategy.name, e))
                continue
            logger.debug(f"{label} via {strategy.name} ok in {time.monotonic() - started:.2f}s")
            return strategy.name, payload
    finally:
        client.close()
    raise AllStrategiesFailed(errors)


def _get(client: httpx.Client, url: str, timeout: float) -> httpx.Response:
    resp = client.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp


def _non_empty(text) -> str:
    if not isinstance(text, str) or not text.strip():
        raise StrategyError("empty body")
    return text


# ─── 页面抓取 ──────────────────────────────────────────────────────────────────

def _corsproxy_html(client: httpx.Client, url: str, timeout: float) -> str:
    resp = _get(client, f"https://corsproxy.io/?{_encode(url)}", timeout)
    return _non_empty(resp.text)


def _codetabs_html(client: httpx.Client, url: str, timeout: float) -> str:
    resp = _get(client, f"https://api.codetabs.com/v1/proxy?quest={_encode(url)}", timeout)
    return _non_empty(resp.text)


def _allorigins_html(client: httpx.Client, url: str, timeout: float) -> str:
    # JSON envelope, the page lives in "contents"; t= defeats relay caching
    api = f"https://api.allorigins.win/get?url={_encode(url)}&t={int(time.time() * 1000)}"
    resp = _get(client, api, timeout)
    data = resp.json()
    if not isinstance(data, dict) or not data.get("contents"):
        raise StrategyError("allorigins envelope has no contents")
    return _non_empty(data["contents"])


HTML_STRATEGIES: tuple[Strategy, ...] = (
    Strategy("corsproxy", _corsproxy_html, TIMEOUT),
    Strategy("codetabs", _codetabs_html, SLOW_TIMEOUT),
    Strategy("allorigins", _allorigins_html, TIMEOUT),
)


def fetch_html(url: str, strategies=HTML_STRATEGIES) -> str:
    try:
        name, page = run_strategies(strategies, url, label="html")
    except AllStrategiesFailed as e:
        raise NetworkError() from e
    logger.info(f"Fetched {url} via {name} ({len(page)} chars)")
    return page

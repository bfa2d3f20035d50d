import html
import re
from urllib.parse import urljoin, urlsplit

from .errors import EmptyInput, InvalidURL
from .models import Platform

_URL_IN_TEXT = re.compile(r'https?://[^\s<>"\']+', re.IGNORECASE)
_HAS_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_VALID_HOST = re.compile(r"^[\w.:-]+$")
# Everything before the first "/", "?" or "#" of a scheme-less input.
_AUTHORITY = re.compile(r"^[^/?#]*")

_WECHAT_CDN = "mmbiz.qpic.cn"
_WECHAT_THUMB = re.compile(r"/640(?:\?.*)?$")
_BILIBILI_CDN = "hdslb.com"
_RESIZE_DIRECTIVE = re.compile(r"@[^/?#]*(?=[?#]|$)")


# ─── 输入规范化 ────────────────────────────────────────────────────────────────

def normalize_url(raw: str) -> str:
    """Turn pasted text (possibly share prose around a link) into a canonical absolute URL."""
    text = (raw or "").strip()
    if not text:
        raise EmptyInput()

    m = _URL_IN_TEXT.search(text)
    if m:
        url = m.group(0)
    elif not _HAS_SCHEME.match(text):
        # whitespace after the host ends the link; inside the host it is invalid
        if any(c.isspace() for c in _AUTHORITY.match(text).group(0)):
            raise InvalidURL()
        url = "https://" + text.split()[0]
    else:
        url = text

    _validate(url)
    return url


def _validate(url: str) -> None:
    if any(c.isspace() for c in url):
        raise InvalidURL()
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        raise InvalidURL()
    host = parts.hostname or ""
    if parts.scheme.lower() not in ("http", "https") or not host or not _VALID_HOST.match(host):
        raise InvalidURL()


def origin(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def unescape_slashes(value: str) -> str:
    """Undo JSON/script escaping of a matched URL (``\\u002F`` and ``\\/``)."""
    value = re.sub(r"\\u002[fF]", "/", value)
    return value.replace("\\", "")


# ─── 封面地址解析与升级 ────────────────────────────────────────────────────────

def resolve_cover_url(raw: str, source_url: str, platform: Platform = Platform.UNKNOWN) -> str:
    url = unescape_slashes(html.unescape(raw.strip()))

    if url.startswith("//"):
        url = "https:" + url
    elif url.startswith("/"):
        url = origin(source_url) + url
    elif not _HAS_SCHEME.match(url):
        url = urljoin(source_url, url)

    return upgrade_resolution(url, platform)


def upgrade_resolution(url: str, platform: Platform = Platform.UNKNOWN) -> str:
    host = (urlsplit(url).hostname or "").lower()

    if _WECHAT_CDN in host:
        url = _WECHAT_THUMB.sub("/0", url)
        if url.startswith("http://"):
            url = "https://" + url[len("http://"):]

    if platform is Platform.BILIBILI or host.endswith(_BILIBILI_CDN):
        url = _RESIZE_DIRECTIVE.sub("", url)

    return url

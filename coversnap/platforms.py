from urllib.parse import urlsplit

from .models import Platform

URL_SIGNATURES: dict[Platform, tuple[str, ...]] = {
    Platform.WECHAT: ("weixin.qq.com",),
    Platform.ZHIHU: ("zhihu.com",),
    Platform.XIAOHONGSHU: ("xiaohongshu.com", "xhslink.com"),
    Platform.BILIBILI: ("bilibili.com", "b23.tv"),
}

# Order matters: WeChat pages often embed links to the other platforms.
CONTENT_MARKERS: tuple[tuple[Platform, tuple[str, ...]], ...] = (
    (Platform.WECHAT, ("mmbiz.qpic.cn", "var msg_cdn_url")),
    (Platform.BILIBILI, ("bilibili.com", "hdslb.com")),
    (Platform.ZHIHU, ("zhihu.com", "zhimg.com")),
    (Platform.XIAOHONGSHU, ("xiaohongshu.com", "xhscdn.com")),
)


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def detect_platform(url: str) -> Platform:
    host = (urlsplit(url).hostname or "").lower()
    for platform, domains in URL_SIGNATURES.items():
        if any(_host_matches(host, d) for d in domains):
            return platform
    return Platform.UNKNOWN


def detect_platform_from_html(page: str) -> Platform:
    for platform, markers in CONTENT_MARKERS:
        if any(m in page for m in markers):
            return platform
    return Platform.UNKNOWN


def promote_platform(platform: Platform, page: str) -> Platform:
    """Refine an UNKNOWN tag from page content; a URL-based tag is kept as is."""
    if platform is not Platform.UNKNOWN:
        return platform
    return detect_platform_from_html(page)

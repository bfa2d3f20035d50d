"""WeChat official-account articles (mp.weixin.qq.com).

The article page declares its cover in ``var msg_cdn_url = "..."``, which
survives template changes better than the meta tags. Images live on the
mmbiz.qpic.cn CDN where a trailing ``/0`` requests the unscaled original.
"""

import re

from .base import meta_rule, pattern_rule, title_pattern_rule

_MMBIZ = r"(?:https?:)?//mmbiz\.qpic\.cn/"

COVER_RULES = (
    pattern_rule("wechat-msg-cdn-url", r'(?:var\s+)?msg_cdn_url\s*=\s*["\']([^"\']+)["\']'),
    meta_rule("og:image", "og:image"),
    meta_rule("twitter:image", "twitter:image"),
    pattern_rule("wechat-cdn-url-key", r'["\']cdn_url["\']\s*:\s*["\']([^"\']+)["\']', unescape=True),
    pattern_rule("wechat-mmbiz-original", _MMBIZ + r"[^\s\"']+/0(?![\w/])", flags=re.IGNORECASE),
    pattern_rule("wechat-mmbiz-any", _MMBIZ + r"[^\s\"']+", flags=re.IGNORECASE, min_length=50),
)

TITLE_RULES = (
    title_pattern_rule("wechat-msg-title", r'var\s+msg_title\s*=\s*["\'](.*?)["\']', re.DOTALL),
)

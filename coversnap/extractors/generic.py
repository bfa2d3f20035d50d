import re

from .base import (
    IMAGE_EXT,
    ITEMPROP_IMAGE,
    SLASHES,
    Rule,
    clean_title,
    link_rule,
    meta_content,
    meta_rule,
    pattern_rule,
    title_pattern_rule,
)

COVER_RULES = (
    meta_rule("og:image", "og:image"),
    meta_rule("twitter:image", "twitter:image", "twitter:image:src"),
    ITEMPROP_IMAGE,
    link_rule("link-image-src", "image_src"),
    link_rule("link-preload-image", "preload", as_="image"),
    pattern_rule(
        "generic-image-key",
        r'["\'](?:cover|poster|thumbnail|pic|image|url)["\']\s*[:=]\s*'
        r'["\']((?:https?:)?' + SLASHES + r'[^"\']+?' + IMAGE_EXT + r')["\']',
        flags=re.IGNORECASE, unescape=True,
    ),
)

TITLE_RULES = (
    Rule("og:title", lambda page, ctx: clean_title(meta_content(page, "og:title"))),
    title_pattern_rule("document-title", r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL),
)

"""Bilibili video pages. Covers are served from ``*.hdslb.com/bfs/archive/``."""

import re

from .base import ITEMPROP_IMAGE, SLASHES, json_title_rule, meta_rule, pattern_rule

_HDSLB = r"(?:https?:)?//[a-z0-9]+\.hdslb\.com/bfs/"

COVER_RULES = (
    meta_rule("og:image", "og:image"),
    meta_rule("bilibili-image-meta", "image"),
    ITEMPROP_IMAGE,
    pattern_rule(
        "bilibili-state-key",
        r'["\'](?:pic|cover|archive)["\']\s*:\s*["\']((?:https?:)?' + SLASHES + r'[^"\']+)["\']',
        unescape=True,
    ),
    pattern_rule("bilibili-hdslb-archive", _HDSLB + r"archive/[a-zA-Z0-9_-]+\.(?:jpg|png|webp)",
                 flags=re.IGNORECASE),
    # may hit an avatar or banner; accepted as a last platform-specific guess
    pattern_rule("bilibili-hdslb-any", _HDSLB + r"[^\s\"']+?\.(?:jpg|png|webp)", flags=re.IGNORECASE),
)

TITLE_RULES = (
    json_title_rule("bilibili-state-title"),
)

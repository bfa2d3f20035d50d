"""Xiaohongshu notes. The page state escapes slashes as ``\\u002F``."""

import re

from .base import SLASHES, json_title_rule, meta_rule, pattern_rule

COVER_RULES = (
    meta_rule("og:image", "og:image"),
    pattern_rule("xhs-url-default-key", r'"urlDefault"\s*:\s*"((?:https?:)?' + SLASHES + r'[^"]+?)"',
                 unescape=True),
    pattern_rule("xhs-url-key", r'"url"\s*:\s*"(https?:' + SLASHES + r'[^"]+?)"', unescape=True),
    pattern_rule("xhs-cdn-scan", r"(?:https?:)?//sns-[\w-]+\.xhscdn\.com/[^\s\"'\\]+",
                 flags=re.IGNORECASE, min_length=50),
)

TITLE_RULES = (
    json_title_rule("xhs-state-title"),
)

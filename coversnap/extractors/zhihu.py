import re

from .base import IMAGE_EXT, SLASHES, meta_rule, pattern_rule

COVER_RULES = (
    meta_rule("og:image", "og:image"),
    pattern_rule("zhihu-cover-url-key", r'"coverUrl"\s*:\s*"(https?:[^"]+?)"', unescape=True),
    pattern_rule("zhihu-title-image-key", r'"titleImage"\s*:\s*"(https?:[^"]+?)"', unescape=True),
    pattern_rule(
        "zhihu-zhimg-scan",
        r"(?:https?:)?" + SLASHES + r"pic[\w-]*\.zhimg\.com/[^\s\"']+?" + IMAGE_EXT,
        flags=re.IGNORECASE, unescape=True, min_length=50,
    ),
)

TITLE_RULES = ()

import logging

from ..errors import NoCoverFound
from ..models import DEFAULT_TITLE, Platform
from . import bilibili, generic, wechat, xiaohongshu, zhihu
from .base import Rule, RuleContext, first_match, is_web_url

logger = logging.getLogger(__name__)

COVER_RULES: dict[Platform, tuple[Rule, ...]] = {
    Platform.WECHAT: wechat.COVER_RULES,
    Platform.ZHIHU: zhihu.COVER_RULES,
    Platform.XIAOHONGSHU: xiaohongshu.COVER_RULES,
    Platform.BILIBILI: bilibili.COVER_RULES,
    Platform.UNKNOWN: (),
}

TITLE_RULES: dict[Platform, tuple[Rule, ...]] = {
    Platform.WECHAT: wechat.TITLE_RULES,
    Platform.ZHIHU: zhihu.TITLE_RULES,
    Platform.XIAOHONGSHU: xiaohongshu.TITLE_RULES,
    Platform.BILIBILI: bilibili.TITLE_RULES,
    Platform.UNKNOWN: (),
}

GENERIC_COVER_RULES = generic.COVER_RULES
GENERIC_TITLE_RULES = generic.TITLE_RULES


def find_cover(page: str, ctx: RuleContext) -> tuple[str, str]:
    """Run the platform rules, then the generic tail; return ``(raw_url, rule_name)``."""
    rules = COVER_RULES[ctx.platform] + GENERIC_COVER_RULES
    value, rule = first_match(rules, page, ctx, accept=is_web_url)
    if not value:
        logger.debug(f"No cover rule matched ({ctx.platform.value}, {len(rules)} rules)")
        raise NoCoverFound()
    logger.debug(f"Cover matched by {rule}: {value[:120]}")
    return value, rule


def find_title(page: str, ctx: RuleContext) -> str:
    value, rule = first_match(GENERIC_TITLE_RULES + TITLE_RULES[ctx.platform], page, ctx)
    if value:
        logger.debug(f"Title matched by {rule}")
        return value.strip()
    return DEFAULT_TITLE


__all__ = [
    "COVER_RULES",
    "TITLE_RULES",
    "GENERIC_COVER_RULES",
    "GENERIC_TITLE_RULES",
    "Rule",
    "RuleContext",
    "find_cover",
    "find_title",
]

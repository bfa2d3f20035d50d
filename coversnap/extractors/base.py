import html
import json
import re
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from ..models import Platform
from ..urls import unescape_slashes

_ATTR = re.compile(r'([\w:-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\')')
# Attribute run of a tag; ">" inside a quoted value does not close the tag.
_ATTR_RUN = r"""(?:[^>"']|"[^"]*"|'[^']*')*"""

# Matches "//", "\/\/" and "\u002F\u002F" as they appear in inline scripts.
SLASHES = r"(?:\\?/|\\u002[fF]){2}"
IMAGE_EXT = r"\.(?:jpg|jpeg|png|webp)"


@dataclass(frozen=True)
class RuleContext:
    platform: Platform
    source_url: str


@dataclass(frozen=True)
class Rule:
    """A named, pure matcher: ``match(page, ctx)`` returns a candidate string or None."""

    name: str
    match: Callable[[str, RuleContext], Optional[str]]


def first_match(rules, page: str, ctx: RuleContext,
                accept: Optional[Callable[[str], bool]] = None) -> tuple[Optional[str], str]:
    for rule in rules:
        value = rule.match(page, ctx)
        if not value:
            continue
        if accept and not accept(value):
            continue
        return value, rule.name
    return None, ""


_FOREIGN_SCHEME = re.compile(r"^\s*(?!https?:)[a-z][a-z0-9+.-]*:(?!\d)", re.IGNORECASE)


def is_web_url(value: str) -> bool:
    """False for data:, blob:, javascript: and other schemes the relays cannot fetch.

    Relative and protocol-relative candidates pass; they are resolved later.
    """
    return not _FOREIGN_SCHEME.match(value)


# ─── 标签属性 ──────────────────────────────────────────────────────────────────

def iter_tags(page: str, tag: str = r"[a-zA-Z][\w-]*") -> Iterator[dict[str, str]]:
    """Yield the attributes of each ``<tag ...>`` as a lower-cased-name dict."""
    for m in re.finditer(rf"<(?:{tag})\b({_ATTR_RUN})>", page, re.IGNORECASE):
        attrs = {}
        for name, dq, sq in _ATTR.findall(m.group(1)):
            attrs.setdefault(name.lower(), dq if dq or not sq else sq)
        yield attrs


def meta_content(page: str, *keys: str) -> Optional[str]:
    """Content of the first ``<meta>`` whose property/name/itemprop is one of ``keys``.

    Attribute order does not matter: ``content`` may come before or after the key.
    """
    wanted = {k.lower() for k in keys}
    for attrs in iter_tags(page, "meta"):
        if not any(attrs.get(a, "").lower() in wanted for a in ("property", "name", "itemprop")):
            continue
        content = attrs.get("content", "").strip()
        if content:
            return content
    return None


def meta_rule(name: str, *keys: str) -> Rule:
    return Rule(name, lambda page, ctx: meta_content(page, *keys))


def _itemprop_image(page: str, ctx: RuleContext) -> Optional[str]:
    for attrs in iter_tags(page):
        if attrs.get("itemprop", "").lower() != "image":
            continue
        value = (attrs.get("content") or attrs.get("href") or attrs.get("src") or "").strip()
        if value:
            return value
    return None


def link_href(page: str, rel: str, as_: str = "") -> Optional[str]:
    for attrs in iter_tags(page, "link"):
        rels = attrs.get("rel", "").lower().split()
        if rel not in rels:
            continue
        if as_ and attrs.get("as", "").lower() != as_:
            continue
        href = attrs.get("href", "").strip()
        if href:
            return href
    return None


def link_rule(name: str, rel: str, as_: str = "") -> Rule:
    return Rule(name, lambda page, ctx: link_href(page, rel, as_))


ITEMPROP_IMAGE = Rule("itemprop-image", _itemprop_image)


# ─── 正则规则 ──────────────────────────────────────────────────────────────────

def pattern_rule(name: str, pattern: str, *, flags: int = 0, unescape: bool = False,
                 min_length: int = 0) -> Rule:
    """Build a rule from a regex.

    The first capture group is the candidate (the whole match when the
    pattern has none). With ``min_length`` every occurrence is scanned and
    shorter candidates are skipped, which keeps icons and avatars out of
    brute-force CDN scans.
    """
    regex = re.compile(pattern, flags)

    def match(page: str, ctx: RuleContext) -> Optional[str]:
        for m in regex.finditer(page):
            value = m.group(1) if regex.groups else m.group(0)
            if unescape:
                value = unescape_slashes(value)
            if value and len(value) >= min_length:
                return value
        return None

    return Rule(name, match)


# ─── 标题 ──────────────────────────────────────────────────────────────────────

MIN_TITLE_LENGTH = 2


def clean_title(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    title = html.unescape(value).strip()
    return title if len(title) >= MIN_TITLE_LENGTH else None


def _json_string(value: str) -> str:
    try:
        return json.loads(f'"{value}"')
    except ValueError:
        return value


def json_title_rule(name: str, key: str = "title") -> Rule:
    regex = re.compile(rf'"{re.escape(key)}"\s*:\s*"((?:[^"\\]|\\.)+)"')

    def match(page: str, ctx: RuleContext) -> Optional[str]:
        for m in regex.finditer(page):
            title = clean_title(_json_string(m.group(1)))
            if title:
                return title
        return None

    return Rule(name, match)


def title_pattern_rule(name: str, pattern: str, flags: int = 0) -> Rule:
    regex = re.compile(pattern, flags)

    def match(page: str, ctx: RuleContext) -> Optional[str]:
        m = regex.search(page)
        return clean_title(m.group(1)) if m else None

    return Rule(name, match)

from dataclasses import asdict, dataclass
from enum import Enum

DEFAULT_TITLE = "Untitled Article"


class Platform(Enum):
    WECHAT = "WeChat"
    ZHIHU = "Zhihu"
    XIAOHONGSHU = "Xiaohongshu"
    BILIBILI = "Bilibili"
    UNKNOWN = "Unknown"


# ─── 数据结构 ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExtractionResult:
    cover_url: str
    original_url: str
    title: str = DEFAULT_TITLE
    platform: Platform = Platform.UNKNOWN

    def to_dict(self) -> dict:
        data = asdict(self)
        data["platform"] = self.platform.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ExtractionResult":
        """Rebuild a result saved with to_dict(); unknown platform names fall back to UNKNOWN."""
        try:
            platform = Platform(data.get("platform", Platform.UNKNOWN.value))
        except ValueError:
            platform = Platform.UNKNOWN
        return cls(
            cover_url=data["cover_url"],
            original_url=data.get("original_url", ""),
            title=data.get("title") or DEFAULT_TITLE,
            platform=platform,
        )


@dataclass(frozen=True)
class AssetDownload:
    content: bytes
    extension: str = "jpg"
    content_type: str = ""
    strategy: str = ""


@dataclass(frozen=True)
class OpenExternally:
    """All retrieval strategies failed; the caller should open ``url`` in a browser."""

    url: str

import logging
from typing import Union

from .download import ASSET_STRATEGIES, retrieve_asset
from .errors import CoverSnapError, EmptyInput, classify_error
from .extractors import RuleContext, find_cover, find_title
from .http import HTML_STRATEGIES, fetch_html
from .models import AssetDownload, ExtractionResult, OpenExternally
from .platforms import detect_platform, promote_platform
from .urls import normalize_url, resolve_cover_url

logger = logging.getLogger(__name__)


def extract(raw_input: str, strategies=HTML_STRATEGIES) -> ExtractionResult:
    """统一提取入口: pasted text in, cover image URL and title out.

    Raises exactly one of EmptyInput, InvalidURL, NetworkError, NoCoverFound
    or UnknownFailure.
    """
    try:
        url = normalize_url(raw_input)
        platform = detect_platform(url)

        page = fetch_html(url, strategies)
        promoted = promote_platform(platform, page)
        if promoted is not platform:
            logger.debug(f"Platform promoted from page content: {promoted.value}")
        ctx = RuleContext(platform=promoted, source_url=url)

        raw_cover, _ = find_cover(page, ctx)
        return ExtractionResult(
            cover_url=resolve_cover_url(raw_cover, url, promoted),
            original_url=url,
            title=find_title(page, ctx),
            platform=promoted,
        )
    except CoverSnapError:
        raise
    except Exception as e:
        logger.warning(f"Extraction failed for {raw_input!r}: {e!r}")
        raise classify_error(e) from e


def download_asset(cover_url: str, strategies=ASSET_STRATEGIES) -> Union[AssetDownload, OpenExternally]:
    if not isinstance(cover_url, str) or not cover_url.strip():
        raise EmptyInput()
    try:
        return retrieve_asset(cover_url.strip(), strategies)
    except CoverSnapError:
        raise
    except Exception as e:
        raise classify_error(e) from e

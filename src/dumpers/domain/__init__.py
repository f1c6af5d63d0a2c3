"""Domain models and deterministic rules for page dumping."""

from src.dumpers.domain.errors import (
    RateLimitError,
    WikiApiError,
    WikiHttpError,
    WikiRequestError,
    is_rate_limited,
)
from src.dumpers.domain.models import (
    DumpSummary,
    PageDumpOutcome,
    PageLookup,
    PageLookupStatus,
    WikiPage,
    WikiPageRef,
)
from src.dumpers.domain.rules import page_file_name, page_file_path

__all__ = [
    "DumpSummary",
    "is_rate_limited",
    "page_file_name",
    "page_file_path",
    "PageDumpOutcome",
    "PageLookup",
    "PageLookupStatus",
    "RateLimitError",
    "WikiApiError",
    "WikiHttpError",
    "WikiPage",
    "WikiPageRef",
    "WikiRequestError",
]

"""Wiki page dumper package."""

from src.dumpers.domain.models import DumpSummary, WikiPage
from src.dumpers.dump import get_page_from_id, run_dump, run_dump_async

__all__ = [
    "DumpSummary",
    "get_page_from_id",
    "run_dump",
    "run_dump_async",
    "WikiPage",
]

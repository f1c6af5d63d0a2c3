"""Infrastructure adapters for page dumping."""

from src.dumpers.infrastructure.fs_store import JsonPageStore
from src.dumpers.infrastructure.mw_client import MediaWikiClient
from src.dumpers.infrastructure.page_list import PageListDumper
from src.dumpers.infrastructure.raw_sink import RawApiJsonlSink
from src.dumpers.infrastructure.reporter import LoguruReporter

__all__ = ["JsonPageStore", "LoguruReporter", "MediaWikiClient", "PageListDumper", "RawApiJsonlSink"]

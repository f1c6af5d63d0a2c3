from __future__ import annotations
import asyncio
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from src.config import settings
from src.dumpers.application.workflows.dump_pages import DumpWorkflowConfig, PageContentDumper, read_page
from src.dumpers.domain.models import DumpSummary, WikiPage
from src.dumpers.infrastructure.fs_store import JsonPageStore
from src.dumpers.infrastructure.mw_client import MediaWikiClient
from src.dumpers.infrastructure.page_list import PageListDumper
from src.dumpers.infrastructure.raw_sink import RawApiJsonlSink
from src.dumpers.infrastructure.reporter import LoguruReporter


async def run_dump_async(
    *,
    base_url: str = settings.WIKI_API_URL,
    user_agent: str = settings.WIKI_USER_AGENT,
    pages_dir: str | Path = settings.WIKI_PAGES_FOLDER,
    page_list_path: str | Path = settings.WIKI_PAGE_LIST,
    raw_dir: str | Path | None = settings.RAW_API_FOLDER,
    refresh_page_list: bool = False,
    workflow_config: DumpWorkflowConfig | None = None,
    show_progress: bool = True,
) -> DumpSummary:
    raw_sink = RawApiJsonlSink(Path(raw_dir), run_id=_build_run_id()) if raw_dir is not None else None
    config = replace(workflow_config or DumpWorkflowConfig(), show_progress=show_progress)
    try:
        async with MediaWikiClient(base_url=base_url, user_agent=user_agent, raw_sink=raw_sink) as client:
            page_list = PageListDumper(page_list_path, wiki_client=client)
            if refresh_page_list:
                await page_list.dump_wiki_page_list()
            dumper = PageContentDumper(
                page_list=page_list,
                wiki_client=client,
                store=JsonPageStore(pages_dir),
                reporter=LoguruReporter("page-content"),
                config=config,
            )
            return await dumper.dump_all_wiki_pages()
    finally:
        if raw_sink is not None:
            raw_sink.close()


def run_dump(
    *,
    base_url: str = settings.WIKI_API_URL,
    user_agent: str = settings.WIKI_USER_AGENT,
    pages_dir: str | Path = settings.WIKI_PAGES_FOLDER,
    page_list_path: str | Path = settings.WIKI_PAGE_LIST,
    raw_dir: str | Path | None = settings.RAW_API_FOLDER,
    refresh_page_list: bool = False,
    workflow_config: DumpWorkflowConfig | None = None,
    show_progress: bool = True,
) -> DumpSummary:
    return asyncio.run(
        run_dump_async(
            base_url=base_url,
            user_agent=user_agent,
            pages_dir=pages_dir,
            page_list_path=page_list_path,
            raw_dir=raw_dir,
            refresh_page_list=refresh_page_list,
            workflow_config=workflow_config,
            show_progress=show_progress,
        )
    )


def get_page_from_id(
    page_id: int,
    *,
    pages_dir: str | Path = settings.WIKI_PAGES_FOLDER,
) -> WikiPage | None:
    store = JsonPageStore(pages_dir, create=False)
    return read_page(store, LoguruReporter("page-content"), page_id).page


def _build_run_id() -> str:
    return datetime.now(timezone.utc).strftime("dump_%Y%m%dT%H%M%S%fZ")

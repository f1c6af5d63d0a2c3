import asyncio
import time
from dataclasses import dataclass
from typing import Any

from tqdm import tqdm

from src.dumpers.application.ports import PageListSource, PageStorePort, Reporter, WikiRequestPort
from src.dumpers.application.retry import BackoffStrategy, FixedDelayBackoff
from src.dumpers.domain.errors import is_rate_limited
from src.dumpers.domain.models import (
    DumpSummary,
    PageDumpOutcome,
    PageLookup,
    PageLookupStatus,
    WikiPage,
)

PARSE_PROPS = "properties|wikitext|displaytitle|subtitle|revid|text"


@dataclass(frozen=True)
class DumpWorkflowConfig:
    max_attempts: int = 5
    retry_delay_seconds: float = 3.0
    progress_every: int = 10
    attempt_timeout_seconds: float | None = 60.0
    show_progress: bool = False


class PageContentDumper:
    """Dumps rendered and raw page content, one JSON file per page id.

    A page whose file already exists is considered dumped and is never fetched
    again, so re-running the batch only fetches what is still missing.
    """

    def __init__(
        self,
        page_list: PageListSource,
        wiki_client: WikiRequestPort,
        store: PageStorePort,
        reporter: Reporter,
        config: DumpWorkflowConfig | None = None,
        backoff: BackoffStrategy | None = None,
    ) -> None:
        self.page_list = page_list
        self.wiki_client = wiki_client
        self.store = store
        self.reporter = reporter
        self.config = config or DumpWorkflowConfig()
        self.backoff = backoff or FixedDelayBackoff(self.config.retry_delay_seconds)

    async def dump_all_wiki_pages(self) -> DumpSummary:
        self.reporter.report("INFO", "Dump All Wiki Pages")
        all_pages = list(self.page_list.get_wiki_page_list())
        total = len(all_pages)
        started = time.monotonic()
        counts = {outcome: 0 for outcome in PageDumpOutcome}
        failed = 0

        with tqdm(
            total=total,
            desc="Dump pages",
            unit="page",
            leave=True,
            disable=not self.config.show_progress,
        ) as progress:
            for index, ref in enumerate(all_pages):
                if index % self.config.progress_every == 0:
                    elapsed = round(time.monotonic() - started)
                    self.reporter.report(
                        "INFO",
                        f"Request {index} / {total} - {elapsed} s elapsed",
                        index=index,
                        total=total,
                        elapsed_seconds=elapsed,
                    )
                try:
                    outcome = await self.dump_wiki_page_by_id(ref.page_id)
                    counts[outcome] += 1
                except Exception as exc:
                    failed += 1
                    self.reporter.report(
                        "ERROR",
                        f"Failed dumping page {ref.page_id}: {type(exc).__name__}: {exc}",
                        page_id=ref.page_id,
                        error_type=type(exc).__name__,
                        exc_info=exc,
                    )
                progress.update(1)

        summary = DumpSummary(
            total=total,
            dumped=counts[PageDumpOutcome.DUMPED],
            skipped=counts[PageDumpOutcome.SKIPPED],
            failed=failed
            + counts[PageDumpOutcome.FETCH_FAILED]
            + counts[PageDumpOutcome.RETRY_EXHAUSTED],
            elapsed_seconds=time.monotonic() - started,
        )
        self.reporter.report(
            "INFO",
            "Dump All Wiki Pages: Completed",
            total=summary.total,
            dumped=summary.dumped,
            skipped=summary.skipped,
            failed=summary.failed,
        )
        return summary

    async def dump_wiki_page_by_id(self, page_id: int) -> PageDumpOutcome:
        if self.store.exists(page_id):
            self.reporter.report("INFO", f"Page {page_id} already exists, skipping.", page_id=page_id)
            return PageDumpOutcome.SKIPPED

        redirects_task = asyncio.create_task(self.wiki_client.get_redirects_to_page(page_id))
        try:
            response, outcome = await self._query_with_retry(page_id)
            if response is None:
                return outcome

            redirects = await self._await_redirects(redirects_task)
            page = self._build_page(page_id, response["parse"], redirects)
        finally:
            if not redirects_task.done():
                redirects_task.cancel()
            await asyncio.gather(redirects_task, return_exceptions=True)

        self.store.write(page)
        self.reporter.report("DEBUG", f"Saved page {page_id}", page_id=page_id, revid=page.revid)
        return PageDumpOutcome.DUMPED

    def get_page_from_id(self, page_id: int) -> WikiPage | None:
        return self.lookup_page(page_id).page

    def lookup_page(self, page_id: int) -> PageLookup:
        return read_page(self.store, self.reporter, page_id)

    async def _query_with_retry(self, page_id: int) -> tuple[dict[str, Any] | None, PageDumpOutcome]:
        max_attempts = self.config.max_attempts
        params = {
            "action": "parse",
            "pageid": str(page_id),
            "format": "json",
            "prop": PARSE_PROPS,
        }
        attempt = 0
        while attempt < max_attempts:
            try:
                response = await self._query_once(params)
            except asyncio.TimeoutError:
                attempt += 1
                reason = f"Request for page {page_id} timed out"
            except Exception as exc:
                if not is_rate_limited(exc):
                    self.reporter.report(
                        "ERROR",
                        f"Failed to fetch page {page_id}: {type(exc).__name__}: {exc}",
                        page_id=page_id,
                        error_type=type(exc).__name__,
                    )
                    return None, PageDumpOutcome.FETCH_FAILED
                attempt += 1
                reason = "Rate limit exceeded"
            else:
                if response:
                    return response, PageDumpOutcome.DUMPED
                attempt += 1
                reason = f"Empty response for page {page_id}"

            if attempt >= max_attempts:
                break
            delay = self.backoff.next_delay(attempt)
            self.reporter.report(
                "WARNING",
                f"{reason}, retrying in {round(delay * 1000)}ms...",
                page_id=page_id,
                attempt=attempt,
                max_attempts=max_attempts,
            )
            await asyncio.sleep(delay)

        self.reporter.report(
            "ERROR",
            f"Failed to fetch page {page_id} after {max_attempts} attempts",
            page_id=page_id,
            attempts=attempt,
        )
        return None, PageDumpOutcome.RETRY_EXHAUSTED

    async def _await_redirects(self, redirects_task: "asyncio.Task[list[Any]]") -> list[Any]:
        timeout = self.config.attempt_timeout_seconds
        if timeout is None:
            return await redirects_task
        return await asyncio.wait_for(redirects_task, timeout=timeout)

    async def _query_once(self, params: dict[str, Any]) -> dict[str, Any]:
        timeout = self.config.attempt_timeout_seconds
        if timeout is None:
            return await self.wiki_client.query(params)
        return await asyncio.wait_for(self.wiki_client.query(params), timeout=timeout)

    @staticmethod
    def _build_page(page_id: int, result: dict[str, Any], redirects: list[Any]) -> WikiPage:
        return WikiPage(
            page_id=page_id,
            pagename=result["title"],
            title=result["displaytitle"],
            displaytitle=result["displaytitle"],
            revid=int(result["revid"]),
            redirects=tuple(redirects or ()),
            properties=tuple((p["name"], p["*"]) for p in result.get("properties", [])),
            content=result["text"]["*"],
            raw_content=result["wikitext"]["*"],
        )


def read_page(store: PageStorePort, reporter: Reporter, page_id: int) -> PageLookup:
    """Read a dumped page; an unreadable file is reported and treated as corrupt."""
    lookup = store.lookup(page_id)
    if lookup.status is PageLookupStatus.CORRUPT:
        reporter.report(
            "WARNING",
            "Page has invalid content",
            page_id=page_id,
            path=str(lookup.path),
            error=lookup.error,
        )
    return lookup

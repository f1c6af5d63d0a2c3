from typing import Any, Protocol, Sequence, runtime_checkable

from src.dumpers.domain.models import PageLookup, WikiPage, WikiPageRef


@runtime_checkable
class PageListSource(Protocol):
    def get_wiki_page_list(self) -> Sequence[WikiPageRef]: ...
    """Return the already loaded, ordered list of pages to dump."""


@runtime_checkable
class WikiRequestPort(Protocol):
    async def query(self, params: dict[str, Any]) -> dict[str, Any]: ...
    """Run one API request. Raises on rate limit or any other failure."""

    async def get_redirects_to_page(self, page_id: int) -> list[dict[str, Any]]: ...
    """List the pages redirecting to ``page_id`` in API order."""


@runtime_checkable
class PageStorePort(Protocol):
    def exists(self, page_id: int) -> bool: ...

    def write(self, page: WikiPage) -> Any: ...

    def lookup(self, page_id: int) -> PageLookup: ...


@runtime_checkable
class Reporter(Protocol):
    def report(self, level: str, message: str, **fields: Any) -> None: ...

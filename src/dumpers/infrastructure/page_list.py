import json
from pathlib import Path

from src.config.logger_config import logger
from src.dumpers.domain.models import WikiPageRef
from src.dumpers.infrastructure.mw_client import MediaWikiClient


class PageListDumper:
    """Keeps the list of pages to dump in a JSON file.

    ``get_wiki_page_list`` only reads the file, the list is refreshed
    explicitly with ``dump_wiki_page_list``.
    """

    def __init__(self, list_path: str | Path, wiki_client: MediaWikiClient | None = None) -> None:
        self.list_path = Path(list_path)
        self.wiki_client = wiki_client

    def get_wiki_page_list(self) -> list[WikiPageRef]:
        if not self.list_path.exists():
            raise FileNotFoundError(
                f"Page list {self.list_path} not found, run the dump with refresh_page_list=True first."
            )
        entries = json.loads(self.list_path.read_text(encoding="utf-8"))
        return [WikiPageRef.from_dict(entry) for entry in entries]

    async def dump_wiki_page_list(self, namespace: int = 0) -> list[WikiPageRef]:
        if self.wiki_client is None:
            raise RuntimeError("PageListDumper needs a wiki client to refresh the page list.")
        refs = await self.wiki_client.fetch_all_pages(namespace=namespace)
        self.list_path.parent.mkdir(parents=True, exist_ok=True)
        self.list_path.write_text(
            json.dumps([ref.to_dict() for ref in refs], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info("Page list written: {} pages to {}", len(refs), str(self.list_path))
        return refs

import json
import os
from pathlib import Path

from src.dumpers.domain.models import PageLookup, PageLookupStatus, WikiPage
from src.dumpers.domain.rules import page_file_path


class JsonPageStore:
    def __init__(self, pages_dir: str | Path, create: bool = True) -> None:
        self.pages_dir = Path(pages_dir)
        if create:
            self.pages_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, page_id: int) -> Path:
        return page_file_path(self.pages_dir, page_id)

    def exists(self, page_id: int) -> bool:
        return self.path_for(page_id).exists()

    def write(self, page: WikiPage) -> Path:
        # <id>.json only ever appears complete: it marks the page as dumped
        file_path = self.path_for(page.page_id)
        payload = json.dumps(page.to_dict(), ensure_ascii=False)
        tmp_path = file_path.with_name(f"{file_path.name}.tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, file_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        return file_path

    def lookup(self, page_id: int) -> PageLookup:
        file_path = self.path_for(page_id)
        if not file_path.exists():
            return PageLookup(status=PageLookupStatus.ABSENT, path=file_path)
        try:
            payload = json.loads(file_path.read_text(encoding="utf-8"))
            page = WikiPage.from_dict(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError, ValueError) as exc:
            return PageLookup(
                status=PageLookupStatus.CORRUPT,
                path=file_path,
                error=f"{type(exc).__name__}: {exc}",
            )
        return PageLookup(status=PageLookupStatus.PRESENT, path=file_path, page=page)

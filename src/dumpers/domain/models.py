from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class WikiPageRef:
    page_id: int
    title: str = ""
    ns: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WikiPageRef":
        page_id = data.get("pageid", data.get("pageId"))
        if page_id is None:
            raise ValueError(f"Page list entry without page id: {data!r}")
        return cls(
            page_id=int(page_id),
            title=str(data.get("title") or ""),
            ns=int(data.get("ns") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"pageid": self.page_id, "ns": self.ns, "title": self.title}


@dataclass(frozen=True)
class WikiPage:
    page_id: int
    pagename: str
    title: str
    displaytitle: str
    revid: int
    redirects: tuple[Any, ...] = field(default_factory=tuple)
    properties: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    content: str = ""
    raw_content: str = ""

    def property_map(self) -> dict[str, str]:
        # duplicate names: last one wins
        return {name: value for name, value in self.properties}

    def to_dict(self) -> dict[str, Any]:
        return {
            "pageId": self.page_id,
            "pagename": self.pagename,
            "title": self.title,
            "displaytitle": self.displaytitle,
            "revid": self.revid,
            "redirects": list(self.redirects),
            "properties": [{"name": name, "value": value} for name, value in self.properties],
            "content": self.content,
            "rawContent": self.raw_content,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WikiPage":
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        page_id = data.get("pageId", data.get("pageid"))
        if page_id is None:
            raise ValueError("Record has no page id")
        return cls(
            page_id=int(page_id),
            pagename=str(data["pagename"]),
            title=str(data.get("title") or ""),
            displaytitle=str(data.get("displaytitle") or ""),
            revid=int(data["revid"]),
            redirects=tuple(data.get("redirects") or ()),
            properties=tuple(
                (str(p["name"]), str(p.get("value", ""))) for p in data.get("properties") or ()
            ),
            content=str(data.get("content") or ""),
            raw_content=str(data.get("rawContent") or ""),
        )


class PageDumpOutcome(str, Enum):
    DUMPED = "dumped"
    SKIPPED = "skipped"
    FETCH_FAILED = "fetch_failed"
    RETRY_EXHAUSTED = "retry_exhausted"


class PageLookupStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class PageLookup:
    status: PageLookupStatus
    path: Path
    page: WikiPage | None = None
    error: str | None = None


@dataclass(frozen=True)
class DumpSummary:
    total: int
    dumped: int
    skipped: int
    failed: int
    elapsed_seconds: float

import asyncio
import json
from datetime import datetime, timezone
from typing import Any

import aiohttp
from aiohttp import ClientError, ContentTypeError

from src.config.logger_config import logger
from src.dumpers.domain.errors import (
    RATE_LIMIT_API_CODES,
    RATE_LIMIT_STATUS,
    RateLimitError,
    WikiApiError,
    WikiHttpError,
    WikiRequestError,
)
from src.dumpers.domain.models import WikiPageRef
from src.dumpers.infrastructure.raw_sink import RawApiJsonlSink


class MediaWikiClient:
    """Thin async wrapper over the MediaWiki action API.

    Every request is a single attempt: retrying is left to the callers, which
    know whether a failure is worth retrying for what they are doing.
    """

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        session: aiohttp.ClientSession | None = None,
        raw_sink: RawApiJsonlSink | None = None,
        request_timeout_seconds: float = 45,
    ) -> None:
        self.base_url = base_url
        self.user_agent = user_agent
        self.raw_sink = raw_sink
        self.timeout = aiohttp.ClientTimeout(total=request_timeout_seconds, connect=10)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "MediaWikiClient":
        if self._session is None:
            connector = aiohttp.TCPConnector(limit_per_host=10, ttl_dns_cache=300)
            self._session = aiohttp.ClientSession(
                connector=connector,
                headers={"User-Agent": self.user_agent},
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def query(self, params: dict[str, Any]) -> dict[str, Any]:
        page_id = params.get("pageid")
        return await self._fetch(
            {**params, "format": "json"},
            operation=str(params.get("action", "query")),
            page_id=int(page_id) if page_id is not None else None,
        )

    async def get_redirects_to_page(self, page_id: int) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "action": "query",
            "pageids": str(page_id),
            "prop": "redirects",
            "rdlimit": "max",
            "format": "json",
            "formatversion": "2",
        }
        redirects: list[dict[str, Any]] = []
        continue_token: dict[str, Any] = {}

        while True:
            data = await self._fetch({**params, **continue_token}, operation="get_redirects_to_page", page_id=page_id)
            for page in data.get("query", {}).get("pages", []):
                for redirect in page.get("redirects", []):
                    redirects.append(
                        {
                            "pageid": redirect.get("pageid"),
                            "ns": redirect.get("ns", 0),
                            "title": redirect.get("title", ""),
                        }
                    )
            if "continue" not in data:
                break
            continue_token = data["continue"]

        return redirects

    async def fetch_all_pages(self, namespace: int = 0) -> list[WikiPageRef]:
        logger.info("Fetching page list for namespace {}...", namespace)
        params: dict[str, Any] = {
            "action": "query",
            "list": "allpages",
            "aplimit": "max",
            "apnamespace": str(namespace),
            "apfilterredir": "nonredirects",
            "format": "json",
            "formatversion": "2",
        }
        refs: list[WikiPageRef] = []
        continue_token: dict[str, Any] = {}

        while True:
            data = await self._fetch({**params, **continue_token}, operation="fetch_all_pages")
            refs.extend(WikiPageRef.from_dict(page) for page in data.get("query", {}).get("allpages", []))
            logger.info("Discovered {} pages so far", len(refs))
            if "continue" not in data:
                break
            continue_token = data["continue"]

        return refs

    async def _fetch(
        self,
        params: dict[str, Any],
        *,
        operation: str,
        page_id: int | None = None,
    ) -> dict[str, Any]:
        if self._session is None:
            raise RuntimeError("MediaWikiClient used outside of 'async with'.")

        started_at = datetime.now(timezone.utc).isoformat()
        status: int | None = None
        try:
            async with self._session.get(self.base_url, params=params, timeout=self.timeout) as resp:
                status = resp.status
                if resp.status == RATE_LIMIT_STATUS:
                    raise RateLimitError(f"HTTP {resp.status} from {self.base_url}")
                if resp.status != 200:
                    body = await resp.text()
                    raise WikiHttpError(f"HTTP {resp.status}: {body[:200]}", status=resp.status)
                try:
                    data = await resp.json()
                except (ContentTypeError, json.JSONDecodeError, ValueError) as exc:
                    raise WikiRequestError(f"Invalid JSON response: {exc}", status=resp.status) from exc

            if isinstance(data, dict) and "error" in data:
                error = data["error"] or {}
                code = str(error.get("code", "unknown"))
                if code in RATE_LIMIT_API_CODES:
                    raise RateLimitError(f"API error {code}: {error.get('info', '')}")
                raise WikiApiError(code, str(error.get("info", "")), status=status)
        except WikiRequestError as exc:
            await self._write_raw_event(operation, params, started_at, "error", status, exc, page_id)
            raise
        except asyncio.TimeoutError as exc:
            await self._write_raw_event(operation, params, started_at, "timeout", status, exc, page_id)
            raise
        except ClientError as exc:
            await self._write_raw_event(operation, params, started_at, "transport_error", status, exc, page_id)
            raise WikiRequestError(f"{type(exc).__name__}: {exc}", status=getattr(exc, "status", None)) from exc

        await self._write_raw_event(operation, params, started_at, "success", status, None, page_id)
        return data

    async def _write_raw_event(
        self,
        operation: str,
        params: dict[str, Any],
        started_at: str,
        outcome: str,
        status: int | None,
        error: BaseException | None,
        page_id: int | None,
    ) -> None:
        if self.raw_sink is None:
            return
        try:
            await self.raw_sink.record_call(
                operation=operation,
                params=params,
                started_at=started_at,
                outcome=outcome,
                status=status,
                error=error,
                page_id=page_id,
            )
        except Exception as exc:
            logger.warning("Failed to persist raw API event: {}", exc)

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class RawApiJsonlSink:
    """Append-only JSONL log of every wiki API call made during one run."""

    def __init__(self, output_dir: str | Path, run_id: str) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.run_id = run_id
        self.file_path = self.output_dir / f"api_calls_{run_id}.jsonl"
        self._lock = asyncio.Lock()
        self._handle = self.file_path.open("a", encoding="utf-8")
        self._closed = False

    async def record_call(
        self,
        *,
        operation: str,
        params: dict[str, Any],
        started_at: str,
        outcome: str,
        status: int | None = None,
        error: BaseException | None = None,
        page_id: int | None = None,
    ) -> None:
        await self.write_event(
            {
                "operation": operation,
                "page_id": page_id,
                "params": params,
                "status": status,
                "outcome": outcome,
                "error": None if error is None else {"type": type(error).__name__, "message": str(error)},
                "timing": {
                    "started_at": started_at,
                    "finished_at": datetime.now(timezone.utc).isoformat(),
                },
            }
        )

    async def write_event(self, event: dict[str, Any]) -> None:
        payload = {"run_id": self.run_id, **event}
        line = json.dumps(payload, ensure_ascii=False, default=str)
        async with self._lock:
            if self._closed:
                raise RuntimeError("RawApiJsonlSink is closed.")
            self._handle.write(line + "\n")
            self._handle.flush()

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._handle.close()

    def __enter__(self) -> "RawApiJsonlSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

import asyncio
import json
import unittest

from src.dumpers.domain.errors import RateLimitError
from src.dumpers.infrastructure.raw_sink import RawApiJsonlSink
from tests.utils.tempdir import managed_temp_dir


class RawApiJsonlSinkTests(unittest.IsolatedAsyncioTestCase):
    async def test_record_call_appends_jsonl(self):
        with managed_temp_dir("raw_sink_record") as tmp:
            with RawApiJsonlSink(tmp, run_id="run_1") as sink:
                await sink.record_call(
                    operation="parse",
                    params={"action": "parse", "pageid": "5"},
                    started_at="2020-01-01T00:00:00+00:00",
                    outcome="error",
                    status=429,
                    error=RateLimitError(),
                    page_id=5,
                )

            lines = (tmp / "api_calls_run_1.jsonl").read_text(encoding="utf-8").splitlines()
            self.assertEqual(len(lines), 1)
            payload = json.loads(lines[0])
            self.assertEqual(payload["run_id"], "run_1")
            self.assertEqual(payload["page_id"], 5)
            self.assertEqual(payload["status"], 429)
            self.assertEqual(payload["error"]["type"], "RateLimitError")
            self.assertIn("finished_at", payload["timing"])

    async def test_write_event_is_concurrency_safe(self):
        with managed_temp_dir("raw_sink_concurrency") as tmp:
            with RawApiJsonlSink(tmp, run_id="run_2") as sink:
                await asyncio.gather(*(sink.write_event({"operation": "query", "attempt": i}) for i in range(20)))

            file_path = tmp / "api_calls_run_2.jsonl"
            payloads = [json.loads(line) for line in file_path.read_text(encoding="utf-8").splitlines()]
            self.assertEqual({int(p["attempt"]) for p in payloads}, set(range(20)))

    async def test_write_after_close_raises(self):
        with managed_temp_dir("raw_sink_closed") as tmp:
            sink = RawApiJsonlSink(tmp, run_id="run_3")
            sink.close()
            sink.close()

            with self.assertRaises(RuntimeError):
                await sink.write_event({"operation": "query"})

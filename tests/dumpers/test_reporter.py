import unittest

from src.config.logger_config import logger
from src.dumpers.application.ports import Reporter
from src.dumpers.infrastructure.reporter import LoguruReporter


class LoguruReporterTests(unittest.TestCase):
    def test_report_forwards_level_message_and_fields(self):
        records = []
        handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
        try:
            LoguruReporter("unit").report("warning", "Page has invalid content", page_id=13)
        finally:
            logger.remove(handler_id)

        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertEqual(record["level"].name, "WARNING")
        self.assertEqual(record["message"], "Page has invalid content")
        self.assertEqual(record["extra"]["page_id"], 13)
        self.assertEqual(record["extra"]["component"], "unit")

    def test_report_attaches_exception_traceback(self):
        records = []
        handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
        try:
            try:
                raise KeyError("parse")
            except KeyError as exc:
                LoguruReporter("unit").report("ERROR", "Failed dumping page 3", page_id=3, exc_info=exc)
        finally:
            logger.remove(handler_id)

        record = records[0]
        self.assertIsNotNone(record["exception"])
        self.assertIs(record["exception"].type, KeyError)
        self.assertNotIn("exc_info", record["extra"])

    def test_satisfies_reporter_protocol(self):
        self.assertIsInstance(LoguruReporter(), Reporter)

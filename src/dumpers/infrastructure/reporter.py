from typing import Any

from src.config.logger_config import logger


class LoguruReporter:
    def __init__(self, name: str = "dumper") -> None:
        self._logger = logger.bind(component=name)

    def report(self, level: str, message: str, **fields: Any) -> None:
        exc_info = fields.pop("exc_info", None)
        # opt(depth=1) so records point at the reporting call site
        self._logger.bind(**fields).opt(depth=1, exception=exc_info).log(level.upper(), message)

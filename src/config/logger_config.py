import sys
from pathlib import Path

from loguru import logger

log_dir = Path("logs")
log_file = log_dir / "dumper_{time}.log"

logger.remove()
logger.add(
    log_file,
    rotation="256 MB",
    retention="10 days",
    compression="zip",
    encoding="utf-8",
    level="DEBUG",
    enqueue=True,
)
logger.add(sys.stderr, level="INFO")

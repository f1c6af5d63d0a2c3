from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class BackoffStrategy(Protocol):
    def next_delay(self, attempt: int) -> float: ...
    """Seconds to wait after failed attempt number ``attempt`` (1-based)."""


@dataclass(frozen=True)
class FixedDelayBackoff(BackoffStrategy):
    delay_seconds: float = 3.0

    def next_delay(self, attempt: int) -> float:
        return self.delay_seconds


@dataclass(frozen=True)
class ExponentialBackoff(BackoffStrategy):
    base_seconds: float = 1.0
    factor: float = 2.0
    max_seconds: float = 60.0

    def next_delay(self, attempt: int) -> float:
        return min(self.max_seconds, self.base_seconds * self.factor ** max(attempt - 1, 0))

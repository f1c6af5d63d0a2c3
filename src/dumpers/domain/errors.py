from typing import Any

RATE_LIMIT_STATUS = 429
RATE_LIMIT_API_CODES = frozenset({"ratelimited"})


class WikiRequestError(Exception):
    """Base error for a failed call to the wiki API."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RateLimitError(WikiRequestError):
    """The wiki asked us to back off; the request may be retried."""

    def __init__(self, message: str = "Rate limit exceeded", status: int | None = RATE_LIMIT_STATUS) -> None:
        super().__init__(message, status=status)


class WikiHttpError(WikiRequestError):
    pass


class WikiApiError(WikiRequestError):
    def __init__(self, code: str, info: str = "", status: int | None = None) -> None:
        super().__init__(f"API error {code}: {info}", status=status)
        self.code = code
        self.info = info


def is_rate_limited(exc: BaseException) -> bool:
    if isinstance(exc, RateLimitError):
        return True
    status: Any = getattr(exc, "status", None)
    return status == RATE_LIMIT_STATUS

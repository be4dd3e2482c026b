"""Single retry/backoff policy wrapped around every GitHub API call."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from http.client import HTTPException
from typing import Any, Callable, Dict, Optional
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from ..config import FetchPolicy, GitHubConfig
from ..errors import ApiError, NetworkError, RateLimited
from ..logging import get_logger
from .ratelimit import RateLimitTracker

RATE_LIMITED_STATUS = 403


@dataclass
class HttpRequest:
    """Represents one outgoing GET request."""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None


@dataclass
class RawResponse:
    """Status, headers and body of a completed HTTP exchange."""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        try:
            return json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ApiError("GitHub API returned invalid JSON", status=self.status) from exc


Transport = Callable[[HttpRequest], RawResponse]


def urllib_transport(request: HttpRequest) -> RawResponse:
    """Issue ``request`` with urllib; HTTP error statuses become responses."""
    http_request = Request(request.url, headers=request.headers, method="GET")
    try:
        with urlopen(http_request, timeout=request.timeout) as response:  # type: ignore[arg-type]
            return RawResponse(
                status=response.status,
                headers=dict(response.headers.items()),
                body=response.read(),
            )
    except HTTPError as exc:
        body = exc.read() if hasattr(exc, "read") else b""
        headers = dict(exc.headers.items()) if exc.headers is not None else {}
        return RawResponse(status=exc.code, headers=headers, body=body or b"")


class ResilientFetcher:
    """Wraps a single network call with throttling and retries.

    Transport failures are retried with exponential backoff. A 403 response
    is treated as the rate-limit signal and waited out until the retry
    budget is spent. Every other response is returned for the caller to
    interpret.
    """

    def __init__(
        self,
        tracker: RateLimitTracker,
        *,
        policy: FetchPolicy | None = None,
        github: GitHubConfig | None = None,
        transport: Transport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.tracker = tracker
        self.policy = policy or FetchPolicy()
        self.github = github or GitHubConfig()
        self._transport = transport or urllib_transport
        self._sleep = sleep
        self._clock = clock
        self.logger = get_logger("github.fetcher")

    @property
    def api_base_url(self) -> str:
        return self.github.api_base_url.rstrip("/")

    def fetch(self, url: str) -> RawResponse:
        attempts = self.policy.attempts
        request = HttpRequest(
            url=url,
            headers={
                "Accept": "application/vnd.github+json",
                "User-Agent": self.github.user_agent,
            },
            timeout=self.github.request_timeout,
        )

        for attempt in range(attempts):
            remaining = self.tracker.remaining
            if remaining is not None and remaining < self.policy.low_water_mark:
                self.logger.warning(
                    "Rate limit low (%d remaining), pausing %.1fs", remaining, self.policy.cooldown
                )
                self._sleep(self.policy.cooldown)

            try:
                response = self._transport(request)
            except (OSError, HTTPException) as exc:
                if attempt < attempts - 1:
                    delay = self.policy.base_delay * (2**attempt)
                    self.logger.warning(
                        "Request to %s failed (%s), retrying in %.1fs", url, exc, delay
                    )
                    self._sleep(delay)
                    continue
                raise NetworkError(f"Request to {url} failed: {exc}", cause=exc) from exc

            self.tracker.observe(response.headers)
            self.logger.debug(
                "GET %s -> %d (attempt %d/%d, %s requests remaining)",
                url,
                response.status,
                attempt + 1,
                attempts,
                self.tracker.remaining,
            )

            if response.status == RATE_LIMITED_STATUS:
                snapshot = self.tracker.snapshot()
                if attempt < attempts - 1:
                    wait = self._rate_limit_wait(snapshot.reset)
                    self.logger.warning(
                        "Rate limited, waiting %.0fs before retry %d/%d",
                        wait,
                        attempt + 1,
                        attempts,
                    )
                    self._sleep(wait)
                    continue
                raise RateLimited(reset_time=snapshot.reset, remaining=snapshot.remaining)

            return response

        raise NetworkError(f"Request to {url} exhausted its retry budget")  # pragma: no cover

    def _rate_limit_wait(self, reset: Optional[int]) -> float:
        cap = self.policy.rate_limit_cap
        if reset is None:
            return cap
        return min(max(reset - self._clock(), 0.0), cap)


__all__ = [
    "HttpRequest",
    "RawResponse",
    "ResilientFetcher",
    "Transport",
    "urllib_transport",
]

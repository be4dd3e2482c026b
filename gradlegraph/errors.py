"""Closed set of terminal error kinds raised by gradlegraph."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Every error kind a caller may observe at the orchestrator boundary."""

    REPO_UNAVAILABLE = "repo_unavailable"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    API_ERROR = "api_error"
    NO_BUILD_FILES = "no_build_files"
    ALL_FETCHES_FAILED = "all_fetches_failed"
    DECODE_ERROR = "decode_error"


class GradleGraphError(RuntimeError):
    """Base class for classified failures; subclasses fix the ``kind``."""

    kind: ErrorKind = ErrorKind.API_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def payload(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"error_code": self.kind.value, "message": self.message}
        data.update(self.payload())
        return data


class RepoUnavailable(GradleGraphError):
    """Repository is missing or private."""

    kind = ErrorKind.REPO_UNAVAILABLE

    def __init__(self, message: str = "Repository not found or is private") -> None:
        super().__init__(message)


class RateLimited(GradleGraphError):
    """Remote rate limit was still exhausted after the retry budget."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        *,
        reset_time: Optional[int] = None,
        remaining: Optional[int] = None,
        message: str = "GitHub API rate limit exceeded",
    ) -> None:
        super().__init__(message)
        self.reset_time = reset_time
        self.remaining = remaining

    def payload(self) -> Dict[str, Any]:
        return {"reset_time": self.reset_time, "remaining": self.remaining}


class NetworkError(GradleGraphError):
    """Transport failure that persisted through every retry."""

    kind = ErrorKind.NETWORK_ERROR

    def __init__(
        self,
        message: str = "Failed to connect to GitHub API",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause

    def payload(self) -> Dict[str, Any]:
        return {"cause": str(self.cause) if self.cause is not None else None}


class ApiError(GradleGraphError):
    """Unexpected non-success response or malformed payload."""

    kind = ErrorKind.API_ERROR

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status

    def payload(self) -> Dict[str, Any]:
        return {"status": self.status}


class NoBuildFiles(GradleGraphError):
    kind = ErrorKind.NO_BUILD_FILES

    def __init__(self, message: str = "No Gradle build files found in repository") -> None:
        super().__init__(message)


class AllFetchesFailed(GradleGraphError):
    kind = ErrorKind.ALL_FETCHES_FAILED

    def __init__(self, message: str = "Failed to fetch any Gradle file content") -> None:
        super().__init__(message)


class DecodeError(GradleGraphError):
    """File content could not be decoded; recorded per file."""

    kind = ErrorKind.DECODE_ERROR

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path

    def payload(self) -> Dict[str, Any]:
        return {"path": self.path}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "AllFetchesFailed",
    "ApiError",
    "ConfigError",
    "DecodeError",
    "ErrorKind",
    "GradleGraphError",
    "NetworkError",
    "NoBuildFiles",
    "RateLimited",
    "RepoUnavailable",
]

"""Pinned, sequential download of build-file contents."""

from __future__ import annotations

import base64
import binascii
import re
import time
from typing import Callable, List, Optional, Sequence
from urllib.parse import quote

from ..config import FetchPolicy
from ..errors import ApiError, DecodeError, GradleGraphError
from ..logging import get_logger
from ..models import BuildFileRef, FetchProgress, FetchedFile, is_commit_sha
from .fetcher import ResilientFetcher

_WHITESPACE = re.compile(r"\s+")

ProgressCallback = Callable[[FetchProgress], None]


def decode_content(content: str, *, encoding: Optional[str] = "base64", path: str | None = None) -> str:
    """Decode the base64 transport encoding used by the contents endpoint."""
    if encoding not in (None, "base64"):
        raise DecodeError(f"Unsupported content encoding '{encoding}'", path=path)
    compact = _WHITESPACE.sub("", content or "")
    try:
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Malformed base64 content: {exc}", path=path) from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Content is not valid UTF-8: {exc}", path=path) from exc


def _as_api_error(path: str, exc: Exception) -> ApiError:
    error = ApiError(f"Failed to fetch file '{path}': {exc}")
    error.__cause__ = exc
    return error


class ContentFetcher:
    """Fetches each build file at one commit, one request at a time."""

    def __init__(
        self,
        fetcher: ResilientFetcher,
        *,
        policy: FetchPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.fetcher = fetcher
        self.policy = policy or fetcher.policy
        self._sleep = sleep
        self.logger = get_logger("github.contents")

    def get_file_content(self, owner: str, repo: str, path: str, commit_sha: str) -> str:
        if not is_commit_sha(commit_sha):
            raise ValueError(f"File contents must be fetched at a commit sha, got {commit_sha!r}")
        url = (
            f"{self.fetcher.api_base_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"
            f"/contents/{quote(path, safe='/')}?ref={commit_sha}"
        )
        response = self.fetcher.fetch(url)
        if not response.ok:
            raise ApiError(
                f"Failed to fetch file '{path}' (status {response.status})",
                status=response.status,
            )
        data = response.json()
        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            raise ApiError(f"Unexpected contents payload for '{path}'", status=response.status)
        return decode_content(data["content"], encoding=data.get("encoding"), path=path)

    def fetch_all(
        self,
        owner: str,
        repo: str,
        files: Sequence[BuildFileRef],
        commit_sha: str,
        on_progress: ProgressCallback | None = None,
    ) -> List[FetchedFile]:
        """Return one record per input file; failures are captured, not raised."""
        if not is_commit_sha(commit_sha):
            raise ValueError(f"File contents must be fetched at a commit sha, got {commit_sha!r}")

        total = len(files)
        self.logger.info(
            "Fetching %d Gradle files with %.1fs spacing", total, self.policy.inter_request_delay
        )
        results: List[FetchedFile] = []
        for index, file in enumerate(files):
            if index > 0 and self.policy.inter_request_delay > 0:
                self._sleep(self.policy.inter_request_delay)
            try:
                content = self.get_file_content(owner, repo, file.path, commit_sha)
            except GradleGraphError as exc:
                self.logger.warning("Failed to fetch %s: %s", file.path, exc.message)
                results.append(FetchedFile(file=file, error=exc))
            except Exception as exc:
                self.logger.warning("Unexpected failure fetching %s: %s", file.path, exc)
                results.append(FetchedFile(file=file, error=_as_api_error(file.path, exc)))
            else:
                results.append(FetchedFile(file=file, content=content))
                self.logger.debug(
                    "Fetched %d/%d: %s (%s requests remaining)",
                    index + 1,
                    total,
                    file.path,
                    self.fetcher.tracker.remaining,
                )
            if on_progress is not None:
                on_progress(
                    FetchProgress(
                        current=index + 1,
                        total=total,
                        path=file.path,
                        remaining_quota=self.fetcher.tracker.remaining,
                    )
                )
        return results


__all__ = ["ContentFetcher", "ProgressCallback", "decode_content"]

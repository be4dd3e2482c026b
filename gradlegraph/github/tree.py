"""Recursive tree listing and build-file discovery."""

from __future__ import annotations

from typing import Iterable, List, Tuple
from urllib.parse import quote

from ..errors import ApiError
from ..logging import get_logger
from ..models import BuildFileKind, BuildFileRef, RepositoryTree, TreeEntry
from .fetcher import ResilientFetcher

# Longest suffix first so ``build.gradle.kts`` is never tagged as ``build.gradle``.
BUILD_FILE_SUFFIXES: Tuple[Tuple[str, BuildFileKind], ...] = (
    ("settings.gradle.kts", BuildFileKind.SETTINGS_GRADLE_KTS),
    ("build.gradle.kts", BuildFileKind.BUILD_GRADLE_KTS),
    ("settings.gradle", BuildFileKind.SETTINGS_GRADLE),
    ("build.gradle", BuildFileKind.BUILD_GRADLE),
)


def build_file_kind(path: str) -> BuildFileKind:
    for suffix, kind in BUILD_FILE_SUFFIXES:
        if path.endswith(suffix):
            return kind
    return BuildFileKind.UNKNOWN


class TreeScanner:
    """Lists a commit's tree and filters it down to Gradle build files."""

    def __init__(self, fetcher: ResilientFetcher) -> None:
        self.fetcher = fetcher
        self.logger = get_logger("github.tree")

    def get_recursive_tree(self, owner: str, repo: str, commit_sha: str) -> RepositoryTree:
        url = (
            f"{self.fetcher.api_base_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"
            f"/git/trees/{quote(commit_sha, safe='')}?recursive=1"
        )
        response = self.fetcher.fetch(url)
        if not response.ok:
            raise ApiError(
                f"Failed to fetch repository tree (status {response.status})",
                status=response.status,
            )
        data = response.json()
        if not isinstance(data, dict) or not isinstance(data.get("tree"), list):
            raise ApiError("Unexpected tree payload from GitHub API")

        entries: List[TreeEntry] = []
        for item in data["tree"]:
            if not isinstance(item, dict) or "path" not in item:
                continue
            size = item.get("size")
            entries.append(
                TreeEntry(
                    path=str(item["path"]),
                    sha=str(item.get("sha", "")),
                    size=size if isinstance(size, int) else None,
                    kind=str(item.get("type", "")),
                )
            )
        truncated = bool(data.get("truncated", False))
        if truncated:
            self.logger.warning("Tree listing for %s/%s@%s was truncated", owner, repo, commit_sha)
        return RepositoryTree(
            sha=str(data.get("sha", commit_sha)), entries=tuple(entries), truncated=truncated
        )

    @staticmethod
    def discover_build_files(entries: Iterable[TreeEntry]) -> List[BuildFileRef]:
        files: List[BuildFileRef] = []
        for entry in entries:
            if entry.kind != "blob":
                continue
            kind = build_file_kind(entry.path)
            if kind is BuildFileKind.UNKNOWN:
                continue
            files.append(BuildFileRef(path=entry.path, sha=entry.sha, size=entry.size, kind=kind))
        return files


__all__ = ["BUILD_FILE_SUFFIXES", "TreeScanner", "build_file_kind"]

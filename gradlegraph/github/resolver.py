"""Repository metadata lookup and ref-to-commit resolution."""

from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import quote

from ..errors import ApiError, RepoUnavailable
from ..logging import get_logger
from ..models import RefKind, RepositoryMetadata, ResolvedReference, is_commit_sha
from .fetcher import RawResponse, ResilientFetcher

_NOT_FOUND = 404
_MAX_TAG_DEREFERENCES = 5


class RepositoryResolver:
    """Turns a human-supplied branch/tag name into an immutable commit."""

    def __init__(self, fetcher: ResilientFetcher) -> None:
        self.fetcher = fetcher
        self.logger = get_logger("github.resolver")

    def get_metadata(self, owner: str, repo: str) -> RepositoryMetadata:
        response = self.fetcher.fetch(self._repo_url(owner, repo))
        if response.status == _NOT_FOUND:
            raise RepoUnavailable()
        if not response.ok:
            raise ApiError(
                f"GitHub API returned status {response.status}", status=response.status
            )
        data = _as_mapping(response.json(), "repository")
        try:
            owner_data = _as_mapping(data["owner"], "repository owner")
            return RepositoryMetadata(
                owner=str(owner_data["login"]),
                name=str(data["name"]),
                default_branch=str(data["default_branch"]),
                is_private=bool(data.get("private", False)),
                full_name=str(data.get("full_name") or f"{owner_data['login']}/{data['name']}"),
            )
        except KeyError as exc:
            raise ApiError(f"Repository payload is missing field {exc}") from exc

    def resolve_ref(
        self,
        owner: str,
        repo: str,
        ref: Optional[str] = None,
        *,
        default_branch: Optional[str] = None,
    ) -> ResolvedReference:
        """Resolve ``ref`` as a branch, falling back to a tag of the same name.

        An empty ``ref`` means the repository's default branch, which is looked
        up unless the caller already knows it.
        """
        if not ref:
            ref = default_branch or self.get_metadata(owner, repo).default_branch

        branch = self.fetcher.fetch(self._ref_url(owner, repo, "heads", ref))
        if branch.ok:
            sha = self._commit_sha(owner, repo, branch)
            self.logger.debug("Resolved branch %s to %s", ref, sha)
            return ResolvedReference(ref=ref, sha=sha, kind=RefKind.BRANCH)
        if branch.status != _NOT_FOUND:
            raise ApiError(f"Failed to resolve branch '{ref}'", status=branch.status)

        tag = self.fetcher.fetch(self._ref_url(owner, repo, "tags", ref))
        if tag.status == _NOT_FOUND:
            raise ApiError(f"Branch or tag '{ref}' not found", status=_NOT_FOUND)
        if not tag.ok:
            raise ApiError(f"Failed to resolve ref '{ref}'", status=tag.status)
        sha = self._commit_sha(owner, repo, tag)
        self.logger.debug("Resolved tag %s to %s", ref, sha)
        return ResolvedReference(ref=ref, sha=sha, kind=RefKind.TAG)

    def _commit_sha(self, owner: str, repo: str, response: RawResponse) -> str:
        target = _ref_target(response.json())
        # Annotated tags point at a tag object; follow it to the commit.
        for _ in range(_MAX_TAG_DEREFERENCES):
            if target.get("type") != "tag":
                break
            tag_response = self.fetcher.fetch(
                f"{self._repo_url(owner, repo)}/git/tags/{target['sha']}"
            )
            if not tag_response.ok:
                raise ApiError(
                    f"Failed to dereference annotated tag {target['sha']}",
                    status=tag_response.status,
                )
            target = _ref_target(tag_response.json())
        sha = str(target.get("sha", ""))
        if not is_commit_sha(sha):
            raise ApiError(f"GitHub API returned a malformed commit sha {sha!r}")
        return sha

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"{self.fetcher.api_base_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    def _ref_url(self, owner: str, repo: str, namespace: str, ref: str) -> str:
        return f"{self._repo_url(owner, repo)}/git/ref/{namespace}/{quote(ref, safe='/')}"


def _ref_target(payload: Any) -> Mapping[str, Any]:
    data = _as_mapping(payload, "git reference")
    target = _as_mapping(data.get("object"), "git reference object")
    if "sha" not in target:
        raise ApiError("Git reference payload is missing the object sha")
    return target


def _as_mapping(value: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ApiError(f"Unexpected {label} payload from GitHub API")
    return value


__all__ = ["RepositoryResolver"]

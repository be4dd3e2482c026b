"""Tests for shared data models and error shapes."""

from __future__ import annotations

import pytest

from gradlegraph.errors import ApiError, DecodeError, ErrorKind, GradleGraphError, NetworkError
from gradlegraph.models import (
    BuildFileKind,
    BuildFileRef,
    FetchedFile,
    RefKind,
    ResolvedReference,
    normalize_project_path,
)

_FILE = BuildFileRef(path="app/build.gradle", sha="c" * 40, size=1, kind=BuildFileKind.BUILD_GRADLE)


def test_fetched_file_holds_content_or_error_never_both() -> None:
    assert FetchedFile(file=_FILE, content="").ok
    assert not FetchedFile(file=_FILE, error=DecodeError("bad")).ok

    with pytest.raises(ValueError):
        FetchedFile(file=_FILE)
    with pytest.raises(ValueError):
        FetchedFile(file=_FILE, content="x", error=DecodeError("bad"))


def test_resolved_reference_requires_commit_sha() -> None:
    assert ResolvedReference(ref="main", sha="f" * 40, kind=RefKind.BRANCH).sha == "f" * 40

    with pytest.raises(ValueError):
        ResolvedReference(ref="main", sha="main", kind=RefKind.BRANCH)


def test_normalize_project_path() -> None:
    assert normalize_project_path("app") == ":app"
    assert normalize_project_path(":app") == ":app"
    with pytest.raises(TypeError):
        normalize_project_path(None)  # type: ignore[arg-type]


def test_error_shapes_share_one_closed_form() -> None:
    api = ApiError("Failed to fetch repository tree (status 500)", status=500)
    network = NetworkError(cause=ConnectionError("offline"))

    assert isinstance(api, GradleGraphError)
    assert api.to_dict() == {
        "error_code": "api_error",
        "message": "Failed to fetch repository tree (status 500)",
        "status": 500,
    }
    assert network.kind is ErrorKind.NETWORK_ERROR
    assert network.to_dict()["cause"] == "offline"

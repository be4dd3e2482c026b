"""Tests for tree listing and Gradle file discovery."""

from __future__ import annotations

import pytest

from gradlegraph.errors import ApiError
from gradlegraph.github.tree import TreeScanner, build_file_kind
from gradlegraph.models import BuildFileKind, TreeEntry
from tests._fixtures.github_stub import API, json_response

SHA = "a" * 40
TREE_URL = f"{API}/repos/acme/widgets/git/trees/{SHA}?recursive=1"


def _entry(path: str, kind: str = "blob") -> TreeEntry:
    return TreeEntry(path=path, sha="c" * 40, size=10, kind=kind)


def test_get_recursive_tree_parses_entries(fetcher, github) -> None:
    github.add(
        TREE_URL,
        json_response(
            {
                "sha": SHA,
                "truncated": False,
                "tree": [
                    {"path": "app", "sha": "d" * 40, "type": "tree"},
                    {"path": "app/build.gradle", "sha": "e" * 40, "size": 120, "type": "blob"},
                ],
            }
        ),
    )

    tree = TreeScanner(fetcher).get_recursive_tree("acme", "widgets", SHA)

    assert tree.sha == SHA
    assert tree.truncated is False
    assert tree.entries == (
        TreeEntry(path="app", sha="d" * 40, size=None, kind="tree"),
        TreeEntry(path="app/build.gradle", sha="e" * 40, size=120, kind="blob"),
    )


def test_get_recursive_tree_surfaces_truncation(fetcher, github) -> None:
    github.add(TREE_URL, json_response({"sha": SHA, "truncated": True, "tree": []}))

    tree = TreeScanner(fetcher).get_recursive_tree("acme", "widgets", SHA)

    assert tree.truncated is True


def test_get_recursive_tree_error_status(fetcher, github) -> None:
    github.add(TREE_URL, json_response({}, status=409))

    with pytest.raises(ApiError) as excinfo:
        TreeScanner(fetcher).get_recursive_tree("acme", "widgets", SHA)

    assert excinfo.value.status == 409


def test_discover_build_files_filters_and_tags() -> None:
    entries = [
        _entry("build.gradle"),
        _entry("settings.gradle.kts"),
        _entry("app/build.gradle.kts"),
        _entry("libs/core/settings.gradle"),
        _entry("libs/core/build.gradle", kind="tree"),
        _entry("README.md"),
        _entry("gradle.properties"),
        _entry("app/build.gradle.kts.bak"),
    ]

    files = TreeScanner.discover_build_files(entries)

    assert [(file.path, file.kind) for file in files] == [
        ("build.gradle", BuildFileKind.BUILD_GRADLE),
        ("settings.gradle.kts", BuildFileKind.SETTINGS_GRADLE_KTS),
        ("app/build.gradle.kts", BuildFileKind.BUILD_GRADLE_KTS),
        ("libs/core/settings.gradle", BuildFileKind.SETTINGS_GRADLE),
    ]


def test_build_file_kind_prefers_longest_suffix() -> None:
    assert build_file_kind("x/build.gradle.kts") is BuildFileKind.BUILD_GRADLE_KTS
    assert build_file_kind("x/build.gradle") is BuildFileKind.BUILD_GRADLE
    assert build_file_kind("pom.xml") is BuildFileKind.UNKNOWN

"""Tests for graph building and canonicalisation."""

from __future__ import annotations

import pytest

from gradlegraph.analyzers.dependencies import DependencyExtractor
from gradlegraph.analyzers.graph import GraphBuilder, canonicalize, infer_project_path
from gradlegraph.models import (
    DependencyPattern,
    GraphEdge,
    GraphNode,
    ParsedFile,
    ProjectDependency,
)


def _dep(path: str, source: str) -> ProjectDependency:
    return ProjectDependency(path, source, DependencyPattern.GROOVY_PROJECT)


def _edge(source: str, target: str, file: str = "x/build.gradle") -> GraphEdge:
    return GraphEdge.create(source, target, file)


@pytest.mark.parametrize(
    ("file_path", "expected"),
    [
        ("app/build.gradle", ":app"),
        ("build.gradle", ":"),
        ("libs/core/build.gradle", ":libs:core"),
        ("settings.gradle.kts", ":"),
    ],
)
def test_infer_project_path(file_path: str, expected: str) -> None:
    assert infer_project_path(file_path) == expected


def test_canonicalize_dedups_sorts_and_drops_self_loops() -> None:
    nodes = [
        GraphNode.from_path(":shared"),
        GraphNode.from_path("app"),
        GraphNode.from_path(":shared"),
        GraphNode.from_path(":Zeta"),
    ]
    edges = [
        _edge(":shared", ":shared"),
        _edge(":app", ":shared", "app/build.gradle"),
        _edge("app", "shared", "other/build.gradle"),
        _edge(":app", ":Zeta"),
    ]

    canonical_nodes, canonical_edges = canonicalize(nodes, edges)

    assert [node.project_path for node in canonical_nodes] == [":Zeta", ":app", ":shared"]
    assert [edge.key for edge in canonical_edges] == [(":app", ":Zeta"), (":app", ":shared")]
    assert canonical_edges[1].source_file_path == "app/build.gradle"


def test_canonicalize_is_idempotent() -> None:
    nodes = [GraphNode.from_path(path) for path in [":b", ":a", "c", ":a"]]
    edges = [_edge(":b", ":a"), _edge(":a", ":c"), _edge(":a", ":a"), _edge(":b", ":a")]

    once = canonicalize(nodes, edges)
    twice = canonicalize(*once)

    assert twice == once


def test_canonicalize_output_is_ordinally_sorted() -> None:
    paths = [":core:ui", ":app", ":core", ":Core", ":app-test", ":app:feature"]
    nodes, _ = canonicalize([GraphNode.from_path(p) for p in paths], [])

    ordered = [node.project_path for node in nodes]
    assert ordered == sorted(ordered)


def test_node_display_name() -> None:
    assert GraphNode.from_path(":core:data").display_name == "core:data"
    assert GraphNode.from_path(":").display_name == "root"


def test_edge_requires_source_file() -> None:
    with pytest.raises(ValueError):
        GraphEdge.create(":a", ":b", "")


def test_build_end_to_end_scenario() -> None:
    parsed = [
        ParsedFile(path="app/build.gradle"),
        ParsedFile(
            path="shared/build.gradle",
            dependencies=[_dep(":libs:core", "shared/build.gradle")],
        ),
    ]

    graph = GraphBuilder().build(parsed)

    assert [node.project_path for node in graph.nodes] == [":app", ":libs:core", ":shared"]
    assert graph.edges == [GraphEdge(":shared", ":libs:core", "shared/build.gradle")]


def test_build_excludes_root_project() -> None:
    parsed = [
        ParsedFile(path="build.gradle", dependencies=[_dep(":app", "build.gradle")]),
        ParsedFile(path="app/build.gradle", dependencies=[_dep(":", "app/build.gradle")]),
        ParsedFile(path="settings.gradle"),
    ]

    graph = GraphBuilder().build(parsed)

    assert [node.project_path for node in graph.nodes] == [":app"]
    assert graph.edges == []
    assert all(":" != node.project_path for node in graph.nodes)


def test_build_excludes_root_project_written_with_whitespace() -> None:
    extracted = DependencyExtractor().extract(
        'dependencies { implementation project(": ") }', "app/build.gradle"
    )
    parsed = [ParsedFile(path="app/build.gradle", dependencies=extracted.dependencies)]

    graph = GraphBuilder().build(parsed)

    assert [node.project_path for node in graph.nodes] == [":app"]
    assert graph.edges == []


def test_build_removes_self_references_and_duplicate_edges() -> None:
    parsed = [
        ParsedFile(
            path="app/build.gradle",
            dependencies=[
                _dep(":app", "app/build.gradle"),
                _dep(":shared", "app/build.gradle"),
                _dep(":shared", "app/build.gradle"),
            ],
        ),
        ParsedFile(path="app/build.gradle.kts", dependencies=[_dep(":shared", "app/build.gradle.kts")]),
    ]

    graph = GraphBuilder().build(parsed)

    assert [edge.key for edge in graph.edges] == [(":app", ":shared")]
    assert graph.edges[0].source_file_path == "app/build.gradle"


def test_build_collects_warnings_once() -> None:
    parsed = [
        ParsedFile(path="a/build.gradle", warnings=["w1"]),
        ParsedFile(path="b/build.gradle", warnings=["w2", "w1"]),
    ]

    assert GraphBuilder().build(parsed).warnings == ["w1", "w2"]

"""Project graph construction and canonicalisation."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from ..models import ROOT_PROJECT_PATH, GraphEdge, GraphNode, ParsedFile


@dataclass
class ProjectGraph:
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def infer_project_path(file_path: str) -> str:
    """Map a build file location to its Gradle project path.

    ``libs/core/build.gradle`` becomes ``:libs:core``; a file at the
    repository root belongs to the root project ``:``.
    """
    directory = posixpath.dirname(file_path.strip("/"))
    if not directory:
        return ROOT_PROJECT_PATH
    return ROOT_PROJECT_PATH + directory.replace("/", ":")


def canonicalize(
    nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]
) -> Tuple[List[GraphNode], List[GraphEdge]]:
    """Deduplicate, drop self-loops and sort by ordinal path comparison.

    The first occurrence of a node path or ``(from, to)`` pair wins. Running
    this on its own output returns the same lists.
    """
    unique_nodes: Dict[str, GraphNode] = {}
    for node in nodes:
        normalised = GraphNode.from_path(node.project_path)
        unique_nodes.setdefault(normalised.project_path, normalised)

    unique_edges: Dict[Tuple[str, str], GraphEdge] = {}
    for edge in edges:
        normalised_edge = GraphEdge.create(
            edge.from_project_path, edge.to_project_path, edge.source_file_path
        )
        if normalised_edge.is_self_loop:
            continue
        unique_edges.setdefault(normalised_edge.key, normalised_edge)

    sorted_nodes = sorted(unique_nodes.values(), key=lambda node: node.project_path)
    sorted_edges = sorted(unique_edges.values(), key=lambda edge: edge.key)
    return sorted_nodes, sorted_edges


class GraphBuilder:
    """Turns per-file extraction results into the canonical project graph."""

    def build(self, parsed_files: Sequence[ParsedFile]) -> ProjectGraph:
        paths: List[str] = []
        edges: List[GraphEdge] = []
        warnings: List[str] = []
        seen_warnings: Set[str] = set()

        for parsed in parsed_files:
            project_path = infer_project_path(parsed.path)
            paths.append(project_path)
            for dependency in parsed.dependencies:
                paths.append(dependency.project_path)
                edges.append(GraphEdge.create(project_path, dependency.project_path, parsed.path))
            for warning in parsed.warnings:
                if warning not in seen_warnings:
                    seen_warnings.add(warning)
                    warnings.append(warning)

        nodes = [
            node
            for node in map(GraphNode.from_path, paths)
            if node.project_path != ROOT_PROJECT_PATH
        ]
        member_edges = [
            edge
            for edge in edges
            if ROOT_PROJECT_PATH not in (edge.from_project_path, edge.to_project_path)
        ]
        canonical_nodes, canonical_edges = canonicalize(nodes, member_edges)
        return ProjectGraph(nodes=canonical_nodes, edges=canonical_edges, warnings=warnings)


__all__ = ["GraphBuilder", "ProjectGraph", "canonicalize", "infer_project_path"]

"""Core data models shared across gradlegraph components."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import GradleGraphError

ROOT_PROJECT_PATH = ":"

_COMMIT_SHA_PATTERN = re.compile(r"^[0-9a-f]{40}$")


def is_commit_sha(value: str) -> bool:
    """Return True when ``value`` is a full 40-character hex commit id."""
    return bool(_COMMIT_SHA_PATTERN.match(value or ""))


class RefKind(str, Enum):
    BRANCH = "branch"
    TAG = "tag"


class BuildFileKind(str, Enum):
    BUILD_GRADLE = "build_gradle"
    BUILD_GRADLE_KTS = "build_gradle_kts"
    SETTINGS_GRADLE = "settings_gradle"
    SETTINGS_GRADLE_KTS = "settings_gradle_kts"
    UNKNOWN = "unknown"


class DependencyPattern(str, Enum):
    """Textual idiom a project reference was recognised by."""

    GROOVY_PROJECT = "groovy_project"
    GROOVY_PROJECT_PATH = "groovy_project_path"
    KOTLIN_PROJECTS_ACCESSOR = "kotlin_projects_accessor"


@dataclass(frozen=True)
class RepositoryMetadata:
    owner: str
    name: str
    default_branch: str
    is_private: bool
    full_name: str


@dataclass(frozen=True)
class ResolvedReference:
    """A branch or tag name pinned to an immutable commit."""

    ref: Optional[str]
    sha: str
    kind: RefKind

    def __post_init__(self) -> None:
        if not is_commit_sha(self.sha):
            raise ValueError(f"Resolved reference requires a 40-character commit sha, got {self.sha!r}")


@dataclass(frozen=True)
class TreeEntry:
    path: str
    sha: str
    size: Optional[int]
    kind: str


@dataclass(frozen=True)
class RepositoryTree:
    sha: str
    entries: Tuple[TreeEntry, ...]
    truncated: bool


@dataclass(frozen=True)
class BuildFileRef:
    path: str
    sha: str
    size: Optional[int]
    kind: BuildFileKind


@dataclass(frozen=True)
class FetchedFile:
    """A build file with either decoded content or the error that prevented it."""

    file: BuildFileRef
    content: Optional[str] = None
    error: Optional[GradleGraphError] = None

    def __post_init__(self) -> None:
        if (self.content is None) == (self.error is None):
            raise ValueError("FetchedFile requires exactly one of content or error")

    @property
    def path(self) -> str:
        return self.file.path

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ProjectDependency:
    project_path: str
    source_file: str
    pattern: DependencyPattern


@dataclass
class ParsedFile:
    """Extraction output for one build file, consumed by the graph builder."""

    path: str
    kind: BuildFileKind = BuildFileKind.UNKNOWN
    dependencies: List[ProjectDependency] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def normalize_project_path(path: str) -> str:
    """Return ``path`` with exactly one leading ``:``."""
    if not isinstance(path, str):
        raise TypeError(f"Project path must be a string, got {type(path).__name__}")
    stripped = path.strip()
    if stripped.startswith(ROOT_PROJECT_PATH):
        return stripped
    return f"{ROOT_PROJECT_PATH}{stripped}"


@dataclass(frozen=True)
class GraphNode:
    project_path: str
    display_name: str

    @classmethod
    def from_path(cls, path: str) -> "GraphNode":
        project_path = normalize_project_path(path)
        return cls(project_path=project_path, display_name=project_path[1:] or "root")


@dataclass(frozen=True)
class GraphEdge:
    from_project_path: str
    to_project_path: str
    source_file_path: str

    @classmethod
    def create(cls, from_path: str, to_path: str, source_file_path: str) -> "GraphEdge":
        if not source_file_path:
            raise ValueError("Graph edges require the build file they were declared in")
        return cls(
            from_project_path=normalize_project_path(from_path),
            to_project_path=normalize_project_path(to_path),
            source_file_path=source_file_path,
        )

    @property
    def key(self) -> Tuple[str, str]:
        return (self.from_project_path, self.to_project_path)

    @property
    def is_self_loop(self) -> bool:
        return self.from_project_path == self.to_project_path


@dataclass(frozen=True)
class FetchProgress:
    """Emitted by the content fetcher after each file."""

    current: int
    total: int
    path: str
    remaining_quota: Optional[int]


@dataclass(frozen=True)
class AnalysisProgress:
    """Stage notification emitted by the orchestrator."""

    stage: str
    message: str
    current: Optional[int] = None
    total: Optional[int] = None
    remaining: Optional[int] = None
    detail: Optional[str] = None


@dataclass(frozen=True)
class AnalysisResult:
    """Hand-off from the API client stage to graph extraction."""

    run_id: str
    owner: str
    repo: str
    resolved_ref: Optional[str]
    commit_sha: str
    started_at: str
    files: Tuple[FetchedFile, ...]
    metadata: RepositoryMetadata
    truncated: bool = False
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RepositoryDescriptor:
    owner: str
    repo: str
    normalized_owner: str
    normalized_repo: str
    normalized_ref: Optional[str]


@dataclass(frozen=True)
class GraphResult:
    """Canonical graph handed to renderers."""

    repository: RepositoryDescriptor
    commit_sha: str
    nodes: Tuple[GraphNode, ...]
    edges: Tuple[GraphEdge, ...]
    warnings: Tuple[str, ...]
    files_analyzed: int
    run_id: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["nodes"] = [asdict(node) for node in self.nodes]
        data["edges"] = [asdict(edge) for edge in self.edges]
        data["warnings"] = list(self.warnings)
        return data


__all__ = [
    "ROOT_PROJECT_PATH",
    "AnalysisProgress",
    "AnalysisResult",
    "BuildFileKind",
    "BuildFileRef",
    "DependencyPattern",
    "FetchProgress",
    "FetchedFile",
    "GraphEdge",
    "GraphNode",
    "GraphResult",
    "ParsedFile",
    "ProjectDependency",
    "RefKind",
    "RepositoryDescriptor",
    "RepositoryMetadata",
    "RepositoryTree",
    "ResolvedReference",
    "TreeEntry",
    "is_commit_sha",
    "normalize_project_path",
]

"""Project dependency extraction for Groovy and Kotlin Gradle scripts."""

from __future__ import annotations

import re
from typing import List

from .base import ExtractionResult, Extractor
from ..models import BuildFileKind, DependencyPattern, ProjectDependency

# project(':module') / project(":module")
_GROOVY_PROJECT = re.compile(r"""\bproject\s*\(\s*['"]([^'"]+)['"]\s*\)""")
# project(path: ':module') / project(path = ":module")
_GROOVY_PROJECT_PATH = re.compile(r"""\bproject\s*\(\s*path\s*[:=]\s*['"]([^'"]+)['"]\s*\)""")
# projects.core.data (type-safe project accessors)
_KOTLIN_PROJECTS_ACCESSOR = re.compile(
    r"\bprojects\.([a-zA-Z][a-zA-Z0-9_]*(?:\.[a-zA-Z][a-zA-Z0-9_]*)*)\b"
)

_CONFIGURATIONS = (
    "implementation",
    "api",
    "compileOnly",
    "runtimeOnly",
    "testImplementation",
    "testRuntimeOnly",
    "androidTestImplementation",
    "debugImplementation",
    "kapt",
    "ksp",
    "annotationProcessor",
)
_CONFIGURATION_GROUP = "|".join(_CONFIGURATIONS)

# implementation("group:artifact:version") or implementation 'group:artifact:version'
_COORDINATE_DEPENDENCY = re.compile(
    rf"""\b(?:{_CONFIGURATION_GROUP})\s*\(?\s*['"]([^'"]+:[^'"]+:[^'"]+)['"]"""
)
# implementation(libs.retrofit) or implementation compose.material3
_CATALOG_DEPENDENCY = re.compile(
    rf"\b(?:{_CONFIGURATION_GROUP})\s*\(?\s*(?:libs|compose)\.[a-zA-Z0-9_.]+"
)


def accessor_to_project_path(dotted: str) -> str:
    """Convert ``core.data`` into ``:core:data``.

    Segments containing a literal dot cannot be expressed this way.
    """
    return ":" + dotted.replace(".", ":")


class DependencyExtractor(Extractor):
    """Finds intra-repository project references in Gradle build scripts.

    External coordinates and version-catalog entries are only counted; they
    surface as a single warning per file and never become graph edges.
    """

    def supports(self, kind: BuildFileKind) -> bool:
        return kind is not BuildFileKind.UNKNOWN

    def extract(self, text: str, source_path: str) -> ExtractionResult:
        dependencies: List[ProjectDependency] = []

        for match in _GROOVY_PROJECT.finditer(text):
            path = match.group(1)
            if path.startswith(":"):
                dependencies.append(
                    ProjectDependency(path, source_path, DependencyPattern.GROOVY_PROJECT)
                )

        for match in _GROOVY_PROJECT_PATH.finditer(text):
            path = match.group(1)
            if path.startswith(":"):
                dependencies.append(
                    ProjectDependency(path, source_path, DependencyPattern.GROOVY_PROJECT_PATH)
                )

        for match in _KOTLIN_PROJECTS_ACCESSOR.finditer(text):
            dependencies.append(
                ProjectDependency(
                    accessor_to_project_path(match.group(1)),
                    source_path,
                    DependencyPattern.KOTLIN_PROJECTS_ACCESSOR,
                )
            )

        external = count_external_dependencies(text)
        warnings: List[str] = []
        if external:
            warnings.append(
                f"File {source_path} contains {external} external (Maven/library) "
                "dependencies that are excluded from the graph"
            )
        return ExtractionResult(dependencies=dependencies, warnings=warnings)


def count_external_dependencies(text: str) -> int:
    coordinates = sum(1 for _ in _COORDINATE_DEPENDENCY.finditer(text))
    catalog = sum(1 for _ in _CATALOG_DEPENDENCY.finditer(text))
    return coordinates + catalog


__all__ = [
    "DependencyExtractor",
    "accessor_to_project_path",
    "count_external_dependencies",
]

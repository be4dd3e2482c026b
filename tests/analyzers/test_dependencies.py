"""Tests for Gradle project dependency extraction."""

from __future__ import annotations

import textwrap

from gradlegraph.analyzers.dependencies import (
    DependencyExtractor,
    accessor_to_project_path,
    count_external_dependencies,
)
from gradlegraph.models import BuildFileKind, DependencyPattern


def _extract(text: str, path: str = "app/build.gradle.kts"):
    return DependencyExtractor().extract(textwrap.dedent(text), path)


def test_extracts_all_three_idioms() -> None:
    result = _extract(
        """
        dependencies {
            implementation(project(":shared"))
            implementation(project(path = ":libs:utils"))
            implementation(projects.core.data)
        }
        """
    )

    assert [(dep.project_path, dep.pattern) for dep in result.dependencies] == [
        (":shared", DependencyPattern.GROOVY_PROJECT),
        (":libs:utils", DependencyPattern.GROOVY_PROJECT_PATH),
        (":core:data", DependencyPattern.KOTLIN_PROJECTS_ACCESSOR),
    ]
    assert all(dep.source_file == "app/build.gradle.kts" for dep in result.dependencies)
    assert result.warnings == []


def test_groovy_quotes_and_named_colon_argument() -> None:
    result = _extract(
        """
        dependencies {
            implementation project(':feature-login')
            api project(path: ':core:network')
        }
        """,
        path="app/build.gradle",
    )

    assert [dep.project_path for dep in result.dependencies] == [":feature-login", ":core:network"]


def test_paths_without_leading_colon_are_ignored() -> None:
    result = _extract(
        """
        def other = project("shared")
        evaluationDependsOn(project(path: "libs"))
        """
    )

    assert result.dependencies == []


def test_external_dependencies_only_produce_a_warning() -> None:
    result = _extract(
        """
        dependencies {
            implementation("com.squareup.okhttp3:okhttp:4.12.0")
            testImplementation 'junit:junit:4.13.2'
            implementation(libs.retrofit)
            debugImplementation(compose.uiTooling)
        }
        """,
        path="net/build.gradle.kts",
    )

    assert result.dependencies == []
    assert result.warnings == [
        "File net/build.gradle.kts contains 4 external (Maven/library) dependencies "
        "that are excluded from the graph"
    ]


def test_mixed_file_keeps_project_deps_and_counts_external() -> None:
    result = _extract(
        """
        dependencies {
            implementation(project(":shared"))
            implementation("org.jetbrains.kotlinx:kotlinx-coroutines-core:1.8.0")
        }
        """
    )

    assert [dep.project_path for dep in result.dependencies] == [":shared"]
    assert len(result.warnings) == 1
    assert "contains 1 external" in result.warnings[0]


def test_idioms_are_scanned_independently() -> None:
    result = _extract('implementation(project(":a"))\nimplementation(project(":a"))\n')

    assert [dep.project_path for dep in result.dependencies] == [":a", ":a"]


def test_supports_every_known_build_file_kind() -> None:
    extractor = DependencyExtractor()

    assert extractor.supports(BuildFileKind.SETTINGS_GRADLE_KTS)
    assert not extractor.supports(BuildFileKind.UNKNOWN)


def test_accessor_conversion_and_external_count_helpers() -> None:
    assert accessor_to_project_path("core.data") == ":core:data"
    assert accessor_to_project_path("app") == ":app"
    assert count_external_dependencies("api 'a:b:1'\nimplementation libs.foo.bar\n") == 2

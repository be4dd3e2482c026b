"""Pipeline orchestration: resolve, scan, fetch, then build the graph."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Callable, List, Optional

from .analyzers import DependencyExtractor, Extractor, GraphBuilder
from .config import GradleGraphConfig, load_config
from .errors import AllFetchesFailed, ApiError, GradleGraphError, NoBuildFiles
from .github import (
    ContentFetcher,
    RateLimitSnapshot,
    RateLimitTracker,
    RepositoryResolver,
    ResilientFetcher,
    TreeScanner,
)
from .github.fetcher import Transport
from .logging import get_logger
from .models import (
    AnalysisProgress,
    AnalysisResult,
    FetchProgress,
    GraphResult,
    ParsedFile,
    RepositoryDescriptor,
)

ProgressListener = Callable[[AnalysisProgress], None]

TRUNCATED_TREE_WARNING = (
    "GitHub truncated the repository tree listing; build files in deep paths may be missing"
)


class AnalysisOrchestrator:
    """Coordinates one analysis run per call against a pinned commit."""

    def __init__(
        self,
        config: GradleGraphConfig | None = None,
        *,
        tracker: RateLimitTracker | None = None,
        transport: Transport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
        fetcher: ResilientFetcher | None = None,
        extractor: Extractor | None = None,
        builder: GraphBuilder | None = None,
    ) -> None:
        self.config = config or load_config()
        self.tracker = tracker or RateLimitTracker()
        self.fetcher = fetcher or ResilientFetcher(
            self.tracker,
            policy=self.config.policy,
            github=self.config.github,
            transport=transport,
            sleep=sleep,
            clock=clock,
        )
        self.resolver = RepositoryResolver(self.fetcher)
        self.scanner = TreeScanner(self.fetcher)
        self.contents = ContentFetcher(self.fetcher, policy=self.config.policy, sleep=sleep)
        self.extractor = extractor or DependencyExtractor()
        self.builder = builder or GraphBuilder()
        self._clock = clock
        self.logger = get_logger("orchestrator")

    def rate_limit(self) -> RateLimitSnapshot:
        return self.fetcher.tracker.snapshot()

    def run(
        self,
        owner: str,
        repo: str,
        ref: Optional[str] = None,
        on_progress: ProgressListener | None = None,
    ) -> GraphResult:
        """Analyze the repository and return its canonical project graph."""
        return self.assemble_graph(self.analyze(owner, repo, ref, on_progress))

    def analyze(
        self,
        owner: str,
        repo: str,
        ref: Optional[str] = None,
        on_progress: ProgressListener | None = None,
    ) -> AnalysisResult:
        """Fetch every Gradle build file of ``owner/repo`` at one commit."""
        run_id = f"run_{int(self._clock() * 1000)}"
        started_at = datetime.now(UTC).isoformat().replace("+00:00", "Z")

        def _notify(event: AnalysisProgress) -> None:
            if on_progress is not None:
                on_progress(event)

        try:
            self.logger.info("Starting %s for %s/%s (ref=%s)", run_id, owner, repo, ref or "default")
            _notify(AnalysisProgress(stage="metadata", message="Fetching repository metadata..."))
            metadata = self.resolver.get_metadata(owner, repo)

            _notify(AnalysisProgress(stage="ref", message="Resolving branch/ref..."))
            resolved = self.resolver.resolve_ref(
                owner, repo, ref, default_branch=metadata.default_branch
            )
            self.logger.info("Pinned %s %s to %s", resolved.kind.value, resolved.ref, resolved.sha)

            _notify(AnalysisProgress(stage="tree", message="Discovering Gradle files..."))
            tree = self.scanner.get_recursive_tree(owner, repo, resolved.sha)
            build_files = self.scanner.discover_build_files(tree.entries)
            if not build_files:
                raise NoBuildFiles()
            self.logger.info("Discovered %d Gradle files", len(build_files))

            warnings: List[str] = []
            if tree.truncated:
                warnings.append(TRUNCATED_TREE_WARNING)

            _notify(
                AnalysisProgress(
                    stage="files",
                    message=f"Fetching {len(build_files)} build files...",
                    total=len(build_files),
                )
            )

            def _file_progress(progress: FetchProgress) -> None:
                _notify(
                    AnalysisProgress(
                        stage="files",
                        message="Fetching build files...",
                        current=progress.current,
                        total=progress.total,
                        remaining=progress.remaining_quota,
                        detail=f"{progress.current}/{progress.total}: {progress.path}",
                    )
                )

            fetched = self.contents.fetch_all(
                owner, repo, build_files, resolved.sha, on_progress=_file_progress
            )
            successes = tuple(record for record in fetched if record.ok)
            if not successes:
                raise AllFetchesFailed()
            for record in fetched:
                if record.error is not None:
                    warnings.append(f"Skipped {record.path}: {record.error.message}")

            return AnalysisResult(
                run_id=run_id,
                owner=owner,
                repo=repo,
                resolved_ref=resolved.ref,
                commit_sha=resolved.sha,
                started_at=started_at,
                files=successes,
                metadata=metadata,
                truncated=tree.truncated,
                warnings=tuple(warnings),
            )
        except GradleGraphError:
            raise
        except Exception as exc:
            message = str(exc) or "Unknown error during repository analysis"
            raise ApiError(message) from exc

    def assemble_graph(self, analysis: AnalysisResult) -> GraphResult:
        """Parse fetched files and build the canonical graph for a renderer."""
        parsed_files: List[ParsedFile] = []
        for record in analysis.files:
            if record.content is None or not self.extractor.supports(record.file.kind):
                continue
            extraction = self.extractor.extract(record.content, record.path)
            parsed_files.append(
                ParsedFile(
                    path=record.path,
                    kind=record.file.kind,
                    dependencies=extraction.dependencies,
                    warnings=extraction.warnings,
                )
            )

        graph = self.builder.build(parsed_files)
        self.logger.info(
            "Graph for %s/%s has %d projects and %d edges",
            analysis.owner,
            analysis.repo,
            len(graph.nodes),
            len(graph.edges),
        )
        return GraphResult(
            repository=RepositoryDescriptor(
                owner=analysis.owner,
                repo=analysis.repo,
                normalized_owner=analysis.metadata.owner,
                normalized_repo=analysis.metadata.name,
                normalized_ref=analysis.resolved_ref,
            ),
            commit_sha=analysis.commit_sha,
            nodes=tuple(graph.nodes),
            edges=tuple(graph.edges),
            warnings=tuple(analysis.warnings) + tuple(graph.warnings),
            files_analyzed=len(parsed_files),
            run_id=analysis.run_id,
        )


__all__ = ["AnalysisOrchestrator", "ProgressListener", "TRUNCATED_TREE_WARNING"]

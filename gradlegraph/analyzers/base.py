"""Base classes for build-file extractors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

from ..models import BuildFileKind, ProjectDependency


@dataclass
class ExtractionResult:
    """Project references and advisory warnings found in one file."""

    dependencies: List[ProjectDependency] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class Extractor(ABC):
    """Contract for extractors that read project references from build files."""

    @abstractmethod
    def supports(self, kind: BuildFileKind) -> bool:
        """Return True when this extractor understands the given file kind."""

    @abstractmethod
    def extract(self, text: str, source_path: str) -> ExtractionResult:
        """Return the project dependencies declared in ``text``."""

"""Build-file extraction and project graph canonicalisation."""

from .base import ExtractionResult, Extractor
from .dependencies import DependencyExtractor, accessor_to_project_path, count_external_dependencies
from .graph import GraphBuilder, ProjectGraph, canonicalize, infer_project_path

__all__ = [
    "DependencyExtractor",
    "ExtractionResult",
    "Extractor",
    "GraphBuilder",
    "ProjectGraph",
    "accessor_to_project_path",
    "canonicalize",
    "count_external_dependencies",
    "infer_project_path",
]

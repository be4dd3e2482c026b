"""Gradle project dependency graphs for public GitHub repositories."""

from .errors import ErrorKind, GradleGraphError
from .models import GraphEdge, GraphNode, GraphResult
from .orchestrator import AnalysisOrchestrator

__version__ = "0.1.0"

__all__ = [
    "AnalysisOrchestrator",
    "ErrorKind",
    "GradleGraphError",
    "GraphEdge",
    "GraphNode",
    "GraphResult",
    "__version__",
]

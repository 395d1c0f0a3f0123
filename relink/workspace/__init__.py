"""Workspace graph, manifest parsing and loading."""

from .graph import EvaluationListener, Workspace
from .loader import load_workspace
from .parser import UnitManifest, parse_dependency_notation, parse_manifest

__all__ = [
    "EvaluationListener",
    "Workspace",
    "load_workspace",
    "UnitManifest",
    "parse_dependency_notation",
    "parse_manifest",
]

"""Exceptions raised by relink."""

from pathlib import Path


class RelinkError(Exception):
    """Base class for all relink errors."""


class ManifestError(RelinkError, ValueError):
    """A unit manifest could not be parsed."""

    def __init__(self, path: Path | None, message: str):
        self.path = path
        self.message = message
        where = f"{path}: " if path is not None else ""
        super().__init__(f"{where}{message}")


class WorkspaceError(RelinkError):
    """The workspace graph is not in the expected state."""


class UnitNotFoundError(WorkspaceError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Build unit '{path}' does not exist in the workspace")


class OutputGroupNotFoundError(WorkspaceError):
    def __init__(self, path: str, group_name: str):
        self.path = path
        self.group_name = group_name
        super().__init__(f"Build unit '{path}' has no output group '{group_name}'")


class EvaluationError(WorkspaceError):
    """Unit evaluation was requested in an impossible order."""

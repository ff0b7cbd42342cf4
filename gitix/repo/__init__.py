"""
Repository Layer

Change detection and workspace materialization.
"""

from gitix.repo.detector import (
    ChangeSet,
    detect_changes,
    find_git_root,
    open_repository,
)
from gitix.repo.workspace import Workspace, start_workspace

__all__ = [
    # detector
    "ChangeSet",
    "detect_changes",
    "find_git_root",
    "open_repository",
    # workspace
    "Workspace",
    "start_workspace",
]

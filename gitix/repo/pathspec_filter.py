"""Pathspec-based file filtering.

This module uses the pathspec library for gitignore handling,
supporting negation patterns, double-star globs, and nested
gitignore files. The shadow copy uses it to leave ignored files out.
"""

import logging
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)


# Always excluded from a shadow copy, gitignore or not
ALWAYS_IGNORED: list[str] = [
    ".git/",
]


class PathspecFilter:
    """File filter based on pathspec library with nested gitignore support."""

    def __init__(self, repo_path: Path, include_nested: bool = True):
        """
        Initialize the filter.

        Args:
            repo_path: Repository root path
            include_nested: Whether to include nested .gitignore files
        """
        self.repo_path = repo_path
        self._root_spec = pathspec.PathSpec.from_lines("gitwildmatch", ALWAYS_IGNORED)
        self._nested_specs: dict[Path, pathspec.PathSpec] = {}
        self._load_gitignore()
        if include_nested:
            self._load_nested_gitignores()

    def _read_spec(self, gitignore_path: Path) -> pathspec.PathSpec:
        with open(gitignore_path, encoding="utf-8") as f:
            lines = f.readlines()
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)

    def _load_gitignore(self) -> None:
        """Load root .gitignore file."""
        gitignore_path = self.repo_path / ".gitignore"
        if gitignore_path.exists():
            self._root_spec = self._root_spec + self._read_spec(gitignore_path)

    def _load_nested_gitignores(self) -> None:
        """Load nested .gitignore files from subdirectories."""
        for gitignore_path in self.repo_path.rglob(".gitignore"):
            if gitignore_path.parent == self.repo_path:
                continue  # root is already loaded
            if ".git" in gitignore_path.relative_to(self.repo_path).parts:
                continue
            try:
                self._nested_specs[gitignore_path.parent] = self._read_spec(gitignore_path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable %s: %s", gitignore_path, e)

    def should_ignore(self, path: Path, is_dir: bool = False) -> bool:
        """
        Check if a path should be ignored.

        Applies gitignore rules with correct precedence:
        1. Root .gitignore applies to all files
        2. Nested .gitignore files apply to files in their directory and below
        """
        if path.is_absolute():
            relative = path.relative_to(self.repo_path)
        else:
            relative = path

        relative_str = relative.as_posix()
        if is_dir:
            relative_str += "/"

        if self._root_spec.match_file(relative_str):
            return True

        for gitignore_dir, spec in self._nested_specs.items():
            gitignore_relative = gitignore_dir.relative_to(self.repo_path)
            try:
                path_from_gitignore = relative.relative_to(gitignore_relative)
            except ValueError:
                continue
            candidate = path_from_gitignore.as_posix() + ("/" if is_dir else "")
            if spec.match_file(candidate):
                return True

        return False

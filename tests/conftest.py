"""
Shared fixtures: throwaway git repositories built with GitPython.
"""

import sys
from pathlib import Path

import pytest
from git import Repo


PYTHON = sys.executable


def write(root: Path, rel: str, content: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class GitRepo:
    """Small helper around a GitPython repository for tests."""

    def __init__(self, path: Path):
        self.path = path
        self.repo = Repo.init(path)
        with self.repo.config_writer() as cw:
            cw.set_value("user", "name", "Test User")
            cw.set_value("user", "email", "test@example.com")
            cw.set_value("commit", "gpgsign", "false")

    def write(self, rel: str, content: str) -> Path:
        return write(self.path, rel, content)

    def read(self, rel: str) -> str:
        return (self.path / rel).read_text(encoding="utf-8")

    def stage(self, *paths: str) -> None:
        self.repo.git.add("--all", "--", *paths)

    def commit(self, message: str = "commit") -> str:
        self.stage()
        self.repo.git.commit("-m", message, "--allow-empty")
        return self.repo.head.commit.hexsha


@pytest.fixture
def isolated_env(monkeypatch):
    """Restore environment variables the workspace may change."""
    monkeypatch.delenv("PYTHONPATH", raising=False)
    monkeypatch.delenv("GOPATH", raising=False)
    monkeypatch.delenv("GITIX_REV", raising=False)
    monkeypatch.delenv("GITIX_STAGED", raising=False)
    monkeypatch.delenv("GITIX_ECOSYSTEM", raising=False)
    return monkeypatch


@pytest.fixture
def git_repo(tmp_path, isolated_env):
    """
    Repository with one committed Python package ``p``.

    The test process runs inside the repository; the working directory
    is restored afterwards.
    """
    repo = GitRepo(tmp_path / "repo")
    repo.write("pyproject.toml", "[project]\nname = \"demo\"\n")
    repo.write("p/__init__.py", "")
    repo.write("p/x.py", "VALUE = 1\n")
    repo.commit("initial")
    isolated_env.chdir(repo.path)
    return repo

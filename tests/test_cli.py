"""
End-to-end tests for the CLI.
"""

import io
import json
import sys
import time

import pytest
from typer.testing import CliRunner

from gitix.checks.engine import StepOutcome
from gitix.checks.tree import Leaf
from gitix.cli.app import app
from gitix.config import WorkspaceConfig
from gitix.executor import ExecutionResult, ExecutionStatus
from gitix.repo.workspace import start_workspace
from gitix.reporters import JsonReporter

PYTHON = sys.executable

CHECKS = f"""
- parallel:
{{% if packages %}}
    - run:
        name: build
        command: '"{PYTHON}" -m py_compile {{{{ _files_ }}}}'
    - run:
        name: vet
        command: '"{PYTHON}" -c "open(''vet.done'', ''w'').close()"'
{{% endif %}}
{{% if files %}}
    - run:
        name: fmt
        command: '"{PYTHON}" -c "import sys; sys.exit(0)"'
{{% endif %}}
{{% if packages %}}
- run:
    name: test compile
    description: Importing changed packages
    command: '"{PYTHON}" -c "import {{{{ packages | join(",") }}}}"'
{{% endif %}}
"""

runner = CliRunner()


@pytest.fixture
def checks_file(tmp_path):
    path = tmp_path / "checks.yml"
    path.write_text(CHECKS, encoding="utf-8")
    return path


class TestCheckCommand:
    """``gitix check`` against a repository with an uncommitted edit."""

    def test_all_checks_pass(self, git_repo, checks_file):
        git_repo.write("p/x.py", "VALUE = 2\n")

        result = runner.invoke(app, ["check", "--ecosystem", "python", str(checks_file)])

        assert result.exit_code == 0, result.output
        assert "Running checks" in result.output
        for name in ("build", "vet", "fmt", "test compile"):
            assert name in result.output
        assert "All 4 checks passed" in result.output

    def test_build_failure_exits_non_zero(self, git_repo, checks_file):
        git_repo.write("p/x.py", "def (:\n")

        result = runner.invoke(app, ["check", "--ecosystem", "python", str(checks_file)])

        assert result.exit_code == 1
        assert "build failed (exit status 1)" in result.output
        assert "test compile" not in result.output
        # vet is independent of build and still runs to completion
        deadline = time.monotonic() + 10
        while not (git_repo.path / "vet.done").exists() and time.monotonic() < deadline:
            time.sleep(0.05)
        assert (git_repo.path / "vet.done").exists()

    def test_dry_run_runs_nothing(self, git_repo, checks_file):
        git_repo.write("p/x.py", "def (:\n")

        result = runner.invoke(app, ["check", "-n", "--ecosystem", "python", str(checks_file)])

        assert result.exit_code == 0, result.output
        assert "[dry-run]" in result.output
        assert not (git_repo.path / "vet.done").exists()

    def test_staged_checks_index_content(self, git_repo, checks_file):
        git_repo.write("p/x.py", "VALUE = 2\n")
        git_repo.stage("p/x.py")
        git_repo.write("p/x.py", "def (:\n")

        result = runner.invoke(
            app, ["check", "--staged", "--ecosystem", "python", str(checks_file)]
        )

        assert result.exit_code == 0, result.output
        # vet ran inside the temporary workspace, not the repository
        assert not (git_repo.path / "vet.done").exists()

    def test_nothing_changed(self, git_repo, checks_file):
        result = runner.invoke(app, ["check", "--ecosystem", "python", str(checks_file)])
        assert result.exit_code == 0, result.output
        assert "All 0 checks passed" in result.output

    def test_bad_rev_spec(self, git_repo):
        result = runner.invoke(app, ["check", "--ecosystem", "python", "--rev", "nope..HEAD"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_unreadable_config(self, git_repo, tmp_path):
        result = runner.invoke(app, ["check", "--ecosystem", "python", str(tmp_path / "missing.yml")])
        assert result.exit_code == 1
        assert "Unable to read config file" in result.output

    def test_invalid_config_shows_rendered_document(self, git_repo, tmp_path):
        bad = tmp_path / "bad.yml"
        bad.write_text("- serial: []\n  parallel: []\n")

        result = runner.invoke(app, ["check", "--ecosystem", "python", str(bad)])

        assert result.exit_code == 1
        assert "Rendered config file" in result.output
        assert "expected exactly one of" in result.output

    def test_not_a_repository(self, tmp_path, isolated_env):
        isolated_env.chdir(tmp_path)
        result = runner.invoke(app, ["check", "--ecosystem", "python"])
        assert result.exit_code == 1
        assert "Not a git repository" in result.output


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "gitix" in result.output


def test_json_reporter(git_repo):
    git_repo.write("p/x.py", "VALUE = 2\n")
    out = io.StringIO()
    reporter = JsonReporter(out)

    with start_workspace(WorkspaceConfig(root=git_repo.path, ecosystem="python")) as ws:
        reporter.start(ws)
    step = Leaf("build", "make")
    reporter.outcome(
        StepOutcome(step, ExecutionResult("make", 0, "ok", 5, ExecutionStatus.SUCCESS))
    )
    reporter.finish(None)

    report = json.loads(out.getvalue())
    assert report["workspace"]["files"] == ["p/x.py"]
    assert report["workspace"]["packages"] == ["p"]
    assert report["steps"][0]["name"] == "build"
    assert report["summary"] == {"passed": True, "failed_step": None}

"""
JSON reporter - machine-readable report printed when the run ends
"""

import json
import sys
from typing import Any, TextIO

from gitix.checks.engine import StepOutcome
from gitix.repo.workspace import Workspace


class JsonReporter:
    """JSON reporter"""

    def __init__(self, output: TextIO | None = None):
        self.output = output or sys.stdout
        self._workspace: dict[str, Any] = {}
        self._steps: list[dict[str, Any]] = []

    def start(self, workspace: Workspace) -> None:
        changes = workspace.changes
        self._workspace = {
            "git_root": str(workspace.git_root),
            "root": str(workspace.root_dir),
            "ecosystem": workspace.ecosystem,
            "files": changes.files,
            "dirs": changes.dirs,
            "trees": changes.trees,
            "packages": changes.packages,
            "locally_changed": changes.locally_changed,
        }

    def outcome(self, outcome: StepOutcome) -> None:
        self._steps.append({"name": outcome.step.name, "ok": outcome.ok, **outcome.result.to_dict()})

    def finish(self, failure: StepOutcome | None) -> None:
        report_data = {
            "workspace": self._workspace,
            "steps": self._steps,
            "summary": {
                "passed": failure is None,
                "failed_step": failure.step.name if failure else None,
            },
        }
        print(json.dumps(report_data, indent=2, ensure_ascii=False), file=self.output)

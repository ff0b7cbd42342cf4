"""
Reporter interface
"""

from typing import Protocol

from gitix.checks.engine import StepOutcome
from gitix.repo.workspace import Workspace


class Reporter(Protocol):
    """Receives check outcomes as they arrive."""

    def start(self, workspace: Workspace) -> None:
        """Checks are about to run."""
        ...

    def outcome(self, outcome: StepOutcome) -> None:
        """A leaf finished."""
        ...

    def finish(self, failure: StepOutcome | None) -> None:
        """The run is over; ``failure`` is the first failing leaf, if any."""
        ...

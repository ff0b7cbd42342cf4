"""
Error types raised by gitix.

Construction-phase errors (detection, staging, config) abort the run
before any check executes. ``CheckFailure`` travels on the results
queue of the execution engine instead of being raised.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from gitix.checks.tree import Leaf
    from gitix.executor import ExecutionResult


class GitixError(Exception):
    """Base error for gitix"""
    pass


class DetectionError(GitixError):
    """A version-control query failed or returned unusable output"""
    pass


class StagingError(GitixError):
    """A filesystem or checkout step failed while materializing the workspace"""
    pass


class ConfigError(GitixError):
    """
    The step-tree document could not be read, rendered or parsed.

    Attributes:
        document: the rendered document text, when rendering got that far
    """

    def __init__(self, message: str, document: Optional[str] = None):
        super().__init__(message)
        self.document = document


class CheckFailure(GitixError):
    """
    A leaf command exited with a non-zero status.

    Attributes:
        step: the failing leaf
        result: the execution result, including captured output
    """

    def __init__(self, step: "Leaf", result: "ExecutionResult"):
        self.step = step
        self.result = result
        super().__init__(self._format())

    def _format(self) -> str:
        header = f'Check "{self.step.name}" failed (exit status {self.result.exit_code})'
        lines = [header, f"Command: {self.result.command.strip()}"]
        output = self.result.output.strip()
        if output:
            lines.append(output)
        return "\n".join(lines)

"""Command executor.

This module runs a single external command for a check leaf:
- Shell execution with combined stdout/stderr capture
- Dry-run mode that only records the command
- Launch failures reported as results, never raised
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
import os
from pathlib import Path
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)


class ExecutionStatus(Enum):
    """Command execution status."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ExecutionResult:
    """Result of command execution."""
    command: str
    exit_code: int
    output: str
    duration_ms: int
    status: ExecutionStatus

    @property
    def ok(self) -> bool:
        return self.status != ExecutionStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "command": self.command,
            "exit_code": self.exit_code,
            "output": self.output,
            "duration_ms": self.duration_ms,
            "status": self.status.value,
        }


@dataclass
class CommandExecutor:
    """
    Runs check commands through the shell.

    Dry run is a property of the executor, so the same check tree can be
    run for real or only printed.
    """
    dry_run: bool = False
    cwd: Path | None = None
    env: dict[str, str] | None = None
    commands: list[str] = field(default_factory=list, repr=False)

    def execute(self, command: str) -> ExecutionResult:
        """
        Execute a command.

        Args:
            command: Shell command line, possibly spanning several lines

        Returns:
            ExecutionResult with exit code and captured output
        """
        self.commands.append(command)

        if self.dry_run:
            logger.info("[dry-run] %s", command.strip())
            return ExecutionResult(
                command=command,
                exit_code=0,
                output=f"[dry-run] {command.strip()}",
                duration_ms=0,
                status=ExecutionStatus.SKIPPED,
            )

        logger.debug("Running: %s", command.strip())
        start_time = time.time()

        env = None
        if self.env:
            env = {**os.environ, **self.env}

        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=self.cwd,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            duration_ms = int((time.time() - start_time) * 1000)
            return ExecutionResult(
                command=command,
                exit_code=-1,
                output=str(e),
                duration_ms=duration_ms,
                status=ExecutionStatus.FAILED,
            )

        duration_ms = int((time.time() - start_time) * 1000)
        status = ExecutionStatus.SUCCESS if result.returncode == 0 else ExecutionStatus.FAILED
        logger.debug("Exit status %d after %dms: %s", result.returncode, duration_ms, command.strip())

        return ExecutionResult(
            command=command,
            exit_code=result.returncode,
            output=result.stdout or "",
            duration_ms=duration_ms,
            status=status,
        )

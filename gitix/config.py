"""
Run configuration

Dataclasses describing how a workspace is materialized and how checks
are executed, plus the environment variable names the CLI reads.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


# ============================================================
# Constants
# ============================================================

# Environment variables read by the CLI
ENV_REV_SPEC = "GITIX_REV"
ENV_STAGED = "GITIX_STAGED"
ENV_ECOSYSTEM = "GITIX_ECOSYSTEM"

# Prefix of the temporary staging directory
TEMP_DIR_PREFIX = "gitix-"


# ============================================================
# Data models
# ============================================================

@dataclass
class WorkspaceConfig:
    """
    Workspace construction options

    Attributes:
        root: repository root (top level of the git working tree)
        path_spec: git path specs restricting which files count as changed;
            empty means the ecosystem's default
        rev_spec: revision range to test; empty means HEAD or the index
        staging: test what is staged in the index rather than the working tree
        use_shadow_link: stage by symlinking the working tree instead of a
            full checkout of the index
        ecosystem: build-unit ecosystem name; None means auto-detect
    """
    root: Path
    path_spec: list[str] = field(default_factory=list)
    rev_spec: str = ""
    staging: bool = False
    use_shadow_link: bool = False
    ecosystem: Optional[str] = None

    @property
    def isolated(self) -> bool:
        """Whether the checks run against a snapshot instead of the tree itself."""
        return bool(self.rev_spec) or self.staging


@dataclass
class RunConfig:
    """
    Check execution options

    Attributes:
        dry_run: print commands instead of running them
        debug: verbose logging and template data dump
        output_format: "rich" or "json"
    """
    dry_run: bool = False
    debug: bool = False
    output_format: str = "rich"

"""
Workspace materializer

Builds the directory checks run against:

1. No revision and no staging: the repository itself
2. A revision range: the newest commit of the range, checked out into
   a temporary directory
3. Staging: the index, either checked out in full or layered over a
   symlinked shadow copy of the working tree

The change queries run concurrently with staging. Package discovery
waits for staging because it must see the snapshot.
"""

import logging
import os
import shutil
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gitix.config import TEMP_DIR_PREFIX, WorkspaceConfig
from gitix.errors import StagingError
from gitix.plugins import PluginRegistry
from gitix.repo.detector import (
    ChangeSet,
    existing_dirs,
    find_git_root,
    get_candidate_dirs,
    get_locally_changed_files,
    get_modified_or_deleted,
    get_updated_files,
    most_recent_commit,
    run_git,
)
from gitix.repo.shadow import shadow_link
from gitix.utils import shortest_prefixes

logger = logging.getLogger(__name__)

# Private index used when checking out a revision, relative to the work dir
REVISION_INDEX_FILE = ".gitix-index"


# ============================================================
# Data models
# ============================================================

@dataclass
class Workspace:
    """
    A materialized view of the repository plus what changed in it

    Attributes:
        git_root: the real repository root
        work_dir: base of the temporary directory, or ``git_root``
        root_dir: directory the checks run in
        changes: changed files, dirs, trees, packages, relative to ``root_dir``
        ecosystem: name of the build-unit ecosystem in use
        delete_on_close: whether ``close`` removes ``work_dir``
    """
    git_root: Path
    work_dir: Path
    root_dir: Path
    changes: ChangeSet
    ecosystem: str
    delete_on_close: bool = False
    _closed: bool = field(default=False, init=False, repr=False)

    @property
    def updated_files(self) -> list[str]:
        return self.changes.files

    @property
    def updated_dirs(self) -> list[str]:
        return self.changes.dirs

    @property
    def updated_trees(self) -> list[str]:
        return self.changes.trees

    @property
    def updated_packages(self) -> list[str]:
        return self.changes.packages

    @property
    def locally_changed_files(self) -> list[str]:
        return self.changes.locally_changed

    def template_data(self) -> dict[str, Any]:
        """Variables available to the step-tree document."""
        data: dict[str, Any] = {
            "gitRoot": str(self.git_root),
            "workRoot": str(self.work_dir),
            "root": str(self.root_dir),
        }
        for name, values in (
            ("files", self.changes.files),
            ("dirs", self.changes.dirs),
            ("trees", self.changes.trees),
            ("topDirs", self.changes.trees),  # old name for trees
            ("packages", self.changes.packages),
        ):
            data[name] = list(values)
            data[f"_{name}_"] = " ".join(values)
        return data

    def close(self) -> None:
        """Remove the temporary directory, if this workspace created one."""
        if self._closed or not self.delete_on_close:
            self._closed = True
            return
        self._closed = True

        # leave the directory before deleting it
        if Path.cwd().is_relative_to(self.work_dir):
            os.chdir(self.git_root)
        logger.debug("Removing %s", self.work_dir)
        shutil.rmtree(self.work_dir)

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


# ============================================================
# Staging
# ============================================================

def _checkout_revision(git_root: Path, work_dir: Path, root_dir: Path, rev_spec: str) -> None:
    """Check out the newest commit of ``rev_spec`` into ``root_dir``."""
    sha = most_recent_commit(git_root, rev_spec)
    logger.debug("Checking out %s into %s", sha, root_dir)
    root_dir.mkdir(parents=True, exist_ok=True)
    run_git(
        git_root, "checkout", sha, "--", ".",
        env={
            "GIT_WORK_TREE": str(root_dir),
            "GIT_INDEX_FILE": str(work_dir / REVISION_INDEX_FILE),
        },
        error=StagingError,
    )


def _checkout_index(git_root: Path, root_dir: Path, paths: list[str]) -> None:
    """Write index content for ``paths`` under ``root_dir``, replacing links."""
    if not paths:
        return
    for path in paths:
        target = root_dir / path
        if target.is_symlink():
            target.unlink()
    run_git(
        git_root, "checkout-index", "-f", "--prefix", f"{root_dir}/", "--", *paths,
        error=StagingError,
    )


def _stage_index(git_root: Path, root_dir: Path) -> None:
    """Check out the whole index into ``root_dir``."""
    root_dir.mkdir(parents=True, exist_ok=True)
    run_git(git_root, "checkout-index", "-a", "-f", "--prefix", f"{root_dir}/", error=StagingError)


def _stage_shadow(git_root: Path, root_dir: Path, updated_files: "Future[list[str]]") -> None:
    """
    Shadow-link the working tree, then overwrite from the index.

    Links alone would expose uncommitted edits, so files modified or
    deleted in the working tree and the files under test are copied
    out of the index.
    """
    shadow_link(git_root, root_dir)
    _checkout_index(git_root, root_dir, get_modified_or_deleted(git_root))
    _checkout_index(git_root, root_dir, updated_files.result())


# ============================================================
# Construction
# ============================================================

def start_workspace(config: WorkspaceConfig) -> Workspace:
    """
    Compute the changes of a repository and materialize its workspace.

    On success the process working directory is the workspace's
    ``root_dir``. On failure a partially built temporary directory is
    left in place for inspection.

    Args:
        config: workspace construction options

    Returns:
        Workspace; release it with ``close``

    Raises:
        DetectionError: a git or toolchain query failed
        StagingError: the snapshot could not be built
    """
    git_root = find_git_root(config.root)
    plugin = PluginRegistry.resolve(git_root, config.ecosystem)
    path_spec = config.path_spec or plugin.info.default_path_spec
    identity = plugin.root_identity(git_root)
    logger.debug("Ecosystem %s, root identity %s", plugin.info.name, identity)

    work_dir = git_root
    root_dir = git_root
    if config.isolated:
        try:
            work_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX)).resolve()
        except OSError as e:
            raise StagingError(f"Unable to create temporary directory: {e}") from e
        root_dir = plugin.effective_root(work_dir, identity)
        plugin.activate(work_dir, root_dir)
        logger.debug("Staging into %s", root_dir)

    with ThreadPoolExecutor(max_workers=3) as pool:
        files_future = pool.submit(get_updated_files, git_root, path_spec, config.rev_spec, config.staging)
        local_future = pool.submit(get_locally_changed_files, git_root, path_spec)
        dirs_future = pool.submit(get_candidate_dirs, git_root, path_spec, config.rev_spec, config.staging)

        try:
            if config.rev_spec:
                _checkout_revision(git_root, work_dir, root_dir, config.rev_spec)
            elif config.staging:
                if config.use_shadow_link:
                    _stage_shadow(git_root, root_dir, files_future)
                else:
                    _stage_index(git_root, root_dir)
            os.chdir(root_dir)
        except OSError as e:
            raise StagingError(f"Unable to stage workspace in {work_dir}: {e}") from e

        # existence is judged in the snapshot, not the source tree
        dirs = existing_dirs(root_dir, dirs_future.result())
        packages = plugin.changed_packages(identity, root_dir, dirs)
        files = files_future.result()
        locally_changed = local_future.result()

    return Workspace(
        git_root=git_root,
        work_dir=work_dir,
        root_dir=root_dir,
        changes=ChangeSet(
            files=files,
            dirs=dirs,
            trees=shortest_prefixes(dirs),
            packages=packages,
            locally_changed=locally_changed,
        ),
        ecosystem=plugin.info.name,
        delete_on_close=config.isolated,
    )

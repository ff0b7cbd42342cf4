"""
Change detector

Answers "what changed" for a repository with git queries run through
GitPython. Three comparison bases are supported:

1. an explicit revision range (``rev_spec``)
2. the index against HEAD (``staging``)
3. the working tree against HEAD (default)

Locally changed files (working tree against index) are computed
independently of the base.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from git import Repo, InvalidGitRepositoryError, NoSuchPathError
from git.exc import CommandError

from gitix.errors import DetectionError, GitixError
from gitix.utils import shortest_prefixes, sort_strings

logger = logging.getLogger(__name__)


# ============================================================
# Data models
# ============================================================

@dataclass(frozen=True)
class ChangeSet:
    """
    What changed in a repository, relative to its root

    Attributes:
        files: changed files that still exist
        dirs: directories of changed files that still exist
        trees: shallowest entries of ``dirs``
        packages: build units rooted in one of ``dirs``
        locally_changed: files whose working copy differs from the index
    """
    files: list[str] = field(default_factory=list)
    dirs: list[str] = field(default_factory=list)
    trees: list[str] = field(default_factory=list)
    packages: list[str] = field(default_factory=list)
    locally_changed: list[str] = field(default_factory=list)


# ============================================================
# Repository access
# ============================================================

def open_repository(path: Path) -> Repo:
    """
    Open the git repository containing ``path``.

    Raises:
        DetectionError: ``path`` is missing or not inside a git working tree
    """
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise DetectionError(f"Not a git repository: {path} ({e.__class__.__name__})") from e


def find_git_root(path: Path) -> Path:
    """Top level of the working tree containing ``path``."""
    repo = open_repository(path)
    if repo.working_tree_dir is None:
        raise DetectionError(f"Repository at {path} has no working tree")
    return Path(repo.working_tree_dir).resolve()


def run_git(root: Path, *args: str, error: type[GitixError] = DetectionError, **kwargs) -> str:
    """Run ``git <args>`` in ``root``, translating failures to ``error``."""
    # one Repo per call, queries run on separate threads
    repo = open_repository(root)
    logger.debug("git %s", " ".join(args))
    try:
        return repo.git.execute(["git", *args], **kwargs)
    except CommandError as e:
        raise error(f"git {args[0]} failed (exit status {e.status}): {e.stderr.strip()}") from e


def _split_z(output: str) -> list[str]:
    return [token for token in output.split("\0") if token]


def _diff_base(rev_spec: str, staging: bool) -> list[str]:
    if rev_spec:
        return [rev_spec]
    if staging:
        return ["--cached"]
    return ["HEAD"]


# ============================================================
# Queries
# ============================================================

def get_updated_files(root: Path, path_spec: list[str], rev_spec: str = "", staging: bool = False) -> list[str]:
    """Files added, copied, modified or renamed relative to the comparison base."""
    output = run_git(
        root, "diff", "--name-only", "-z", "--diff-filter=ACMR",
        *_diff_base(rev_spec, staging), "--", *path_spec,
    )
    return sort_strings(_split_z(output))


def get_locally_changed_files(root: Path, path_spec: list[str]) -> list[str]:
    """Files whose working tree content differs from the index."""
    output = run_git(root, "diff", "--name-only", "-z", "--diff-filter=ACMR", "--", *path_spec)
    return sort_strings(_split_z(output))


def parse_name_status(output: str) -> list[str]:
    """
    All paths named in ``git diff --name-status -z`` output.

    Renames and copies contribute both their source and destination.
    """
    tokens = _split_z(output)
    paths: list[str] = []
    i = 0
    while i < len(tokens):
        status = tokens[i]
        if not status or not status[0].isalpha():
            raise DetectionError(f"Unexpected diff status {status!r}")
        count = 2 if status[0] in ("R", "C") else 1
        paths.extend(tokens[i + 1:i + 1 + count])
        i += 1 + count
    return paths


def get_candidate_dirs(root: Path, path_spec: list[str], rev_spec: str = "", staging: bool = False) -> list[str]:
    """
    Parent directories of every path touched relative to the comparison base.

    Deletions count, so a directory that lost a file is a candidate
    whether or not it still holds others. Use ``existing_dirs`` to drop
    the ones absent from the tree the checks will see.
    """
    output = run_git(
        root, "diff", "--name-status", "-z", "--diff-filter=ACDMR",
        *_diff_base(rev_spec, staging), "--", *path_spec,
    )
    return sort_strings({Path(path).parent.as_posix() for path in parse_name_status(output)})


def existing_dirs(tree: Path, dirs: list[str]) -> list[str]:
    """Entries of ``dirs`` that are directories under ``tree``."""
    return [d for d in dirs if (tree / d).is_dir()]


def get_updated_dirs(root: Path, path_spec: list[str], rev_spec: str = "", staging: bool = False) -> list[str]:
    """Directories of changed files that still exist in the working tree at ``root``."""
    return existing_dirs(root, get_candidate_dirs(root, path_spec, rev_spec, staging))


def get_modified_or_deleted(root: Path) -> list[str]:
    """Files in the index whose working copy was modified or deleted."""
    output = run_git(root, "ls-files", "-z", "--modified", "--deleted")
    return sort_strings(_split_z(output))


def most_recent_commit(root: Path, rev_spec: str) -> str:
    """
    Newest commit in a revision range.

    Raises:
        DetectionError: the range is invalid or empty
    """
    shas = run_git(root, "rev-list", rev_spec).split()
    if not shas:
        raise DetectionError(f'Could not find any commits in range "{rev_spec}"')
    return shas[0]


def detect_changes(
    root: Path,
    path_spec: list[str],
    rev_spec: str = "",
    staging: bool = False,
) -> ChangeSet:
    """
    Compute a ChangeSet without packages, sequentially.

    ``start_workspace`` runs the same queries concurrently and adds
    packages once the workspace is staged.
    """
    dirs = get_updated_dirs(root, path_spec, rev_spec, staging)
    return ChangeSet(
        files=get_updated_files(root, path_spec, rev_spec, staging),
        dirs=dirs,
        trees=shortest_prefixes(dirs),
        locally_changed=get_locally_changed_files(root, path_spec),
    )

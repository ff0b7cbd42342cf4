"""
Shadow copy of a directory tree

Recreates the directory structure of a source tree and links every
file back to its source with a symlink, leaving out what the
repository's gitignore rules exclude.
"""

import logging
import os
from pathlib import Path

from gitix.repo.pathspec_filter import PathspecFilter

logger = logging.getLogger(__name__)


def shadow_link(source: Path, target: Path) -> int:
    """
    Mirror ``source`` into ``target`` using symlinks.

    Args:
        source: tree to mirror; must be absolute
        target: destination directory, created if missing

    Returns:
        number of links created

    Raises:
        OSError: a directory or link could not be created
    """
    source = source.resolve()
    ignore = PathspecFilter(source)
    target.mkdir(parents=True, exist_ok=True)
    count = 0

    for dirpath, dirnames, filenames in os.walk(source):
        current = Path(dirpath)
        rel_dir = current.relative_to(source)
        dest_dir = target / rel_dir

        kept_dirs = []
        for name in dirnames:
            src = current / name
            if ignore.should_ignore(rel_dir / name, is_dir=True):
                continue
            if src.is_symlink():
                # linked directories are linked, not descended into
                os.symlink(src, dest_dir / name)
                count += 1
                continue
            (dest_dir / name).mkdir(exist_ok=True)
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for name in filenames:
            if ignore.should_ignore(rel_dir / name):
                continue
            os.symlink(current / name, dest_dir / name)
            count += 1

    logger.debug("Shadow-linked %d entries from %s into %s", count, source, target)
    return count

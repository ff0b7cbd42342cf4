"""
Check tree

A check is a leaf command, or a serial or parallel group of checks.
Trees are built once from the step-tree document and never modified.
"""

from dataclasses import dataclass
from typing import Iterator, Union


@dataclass(frozen=True)
class Leaf:
    """
    A single command to run

    Attributes:
        name: short label shown in reports
        command: shell command line
        description: optional longer explanation
    """
    name: str
    command: str
    description: str = ""


@dataclass(frozen=True)
class Serial:
    """Children run in order, stopping at the first failure."""
    children: tuple["Check", ...] = ()


@dataclass(frozen=True)
class Parallel:
    """Children run concurrently, all to completion."""
    children: tuple["Check", ...] = ()


Check = Union[Leaf, Serial, Parallel]


def iter_leaves(check: Check) -> Iterator[Leaf]:
    """All leaves of a tree in declaration order."""
    if isinstance(check, Leaf):
        yield check
        return
    for child in check.children:
        yield from iter_leaves(child)

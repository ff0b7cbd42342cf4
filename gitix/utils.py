"""Small helpers for path sets."""

from typing import Iterable


def sort_strings(values: Iterable[str]) -> list[str]:
    """Return a sorted, de-duplicated list."""
    return sorted(set(values))


def is_ancestor(parent: str, child: str) -> bool:
    """
    Whether ``parent`` is a directory ancestor of ``child`` (inclusive).

    Comparison is by path component, so "a" is an ancestor of "a/b"
    but not of "ab". "." is an ancestor of everything.
    """
    if parent == "." or parent == child:
        return True
    return child.startswith(parent.rstrip("/") + "/")


def shortest_prefixes(dirs: Iterable[str]) -> list[str]:
    """
    Reduce directories to the shallowest ones.

    No element of the result is a strict ancestor of another, and every
    input directory has an ancestor (itself included) in the result.
    """
    unique = sort_strings(dirs)
    if "." in unique:
        return ["."]

    result: list[str] = []
    for d in unique:
        # sorted order puts ancestors before their descendants
        if not any(is_ancestor(p, d) for p in result):
            result.append(d)
    return result

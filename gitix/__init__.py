"""
gitix - run checks against the changed parts of a git repository

Computes the changed files, directories and packages of a repository,
optionally stages them into an isolated snapshot, then runs a declared
tree of serial/parallel check commands against it.
"""

__version__ = "0.3.0"

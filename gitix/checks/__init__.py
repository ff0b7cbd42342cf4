"""
Checks Layer

Check tree model, step-tree document loading and the execution engine.
"""

from gitix.checks.tree import Check, Leaf, Parallel, Serial, iter_leaves
from gitix.checks.parser import CheckParser
from gitix.checks.document import load_check_tree, read_document
from gitix.checks.engine import StepOutcome, drain, run_check, start_check

__all__ = [
    # tree
    "Check",
    "Leaf",
    "Parallel",
    "Serial",
    "iter_leaves",
    # parser / document
    "CheckParser",
    "load_check_tree",
    "read_document",
    # engine
    "StepOutcome",
    "drain",
    "run_check",
    "start_check",
]

"""
Reporters - terminal and JSON output of check outcomes
"""

from gitix.reporters.base import Reporter
from gitix.reporters.rich_reporter import RichReporter
from gitix.reporters.json_reporter import JsonReporter

__all__ = [
    "Reporter",
    "RichReporter",
    "JsonReporter",
]

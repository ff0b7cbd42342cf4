"""
CLI Layer - 命令行接口层
"""

from gitix.cli.app import app, check, run, version

__all__ = [
    "app",
    "check",
    "run",
    "version",
]

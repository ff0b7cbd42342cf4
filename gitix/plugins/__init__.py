"""Ecosystem plugin system for gitix.

插件通过 PluginRegistry 自动发现和注册，无需手动 import。
"""

from gitix.plugins.base import (
    EcosystemInfo,
    EcosystemPlugin,
    PluginRegistry,
)

__all__ = [
    "EcosystemInfo",
    "EcosystemPlugin",
    "PluginRegistry",
]

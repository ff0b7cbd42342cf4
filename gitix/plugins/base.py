"""Ecosystem plugin base classes.

This module provides the plugin architecture for the build-unit
ecosystems gitix understands: how a repository root is identified,
where its snapshot lives, which packages exist under it and which
checks run by default.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import subprocess

from gitix.errors import DetectionError

logger = logging.getLogger(__name__)


@dataclass
class EcosystemInfo:
    """Ecosystem information."""
    name: str
    config_files: list[str]
    default_path_spec: list[str] = field(default_factory=list)


def run_query(args: list[str], cwd: Path) -> str:
    """
    Run a toolchain query and return its stdout.

    Raises:
        DetectionError: the tool is missing or exited non-zero
    """
    logger.debug("Query in %s: %s", cwd, " ".join(args))
    try:
        proc = subprocess.run(
            args,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise DetectionError(f"Unable to run {args[0]}: {exc}") from exc

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise DetectionError(f"'{' '.join(args)}' failed with exit status {proc.returncode}: {stderr}")
    return proc.stdout or ""


def prepend_env_path(name: str, value: str) -> None:
    """Put ``value`` first on the os.pathsep separated variable ``name``."""
    current = os.environ.get(name)
    os.environ[name] = os.pathsep.join([value, current]) if current else value


class EcosystemPlugin(ABC):
    """Base class for ecosystem plugins."""

    @property
    @abstractmethod
    def info(self) -> EcosystemInfo:
        """Return ecosystem information."""
        pass

    @property
    @abstractmethod
    def default_flow(self) -> str:
        """The built-in step-tree document template."""
        pass

    def detect(self, repo_path: Path) -> bool:
        """Detect if project belongs to this ecosystem."""
        return any((repo_path / name).exists() for name in self.info.config_files)

    @abstractmethod
    def root_identity(self, repo_path: Path) -> str:
        """Module identity of the repository root."""
        pass

    @abstractmethod
    def effective_root(self, work_dir: Path, identity: str) -> Path:
        """Where the snapshot of the repository lives inside ``work_dir``."""
        pass

    def activate(self, work_dir: Path, effective_root: Path) -> None:
        """
        Adjust process environment so tools resolve modules in the snapshot.

        子类按需重写，默认不做任何事。
        """
        pass

    @abstractmethod
    def list_packages(self, effective_root: Path) -> list[str]:
        """Every package identifier rooted under ``effective_root``."""
        pass

    @abstractmethod
    def package_dir(self, identity: str, package: str) -> str:
        """Repository-relative directory of a package; the root maps to "."."""
        pass

    def changed_packages(self, identity: str, effective_root: Path, dirs: list[str]) -> list[str]:
        """
        Packages whose directory is among the changed directories.

        Must be called after the workspace is staged so the listing
        reflects the snapshot.
        """
        wanted = set(dirs)
        return sorted(
            {p for p in self.list_packages(effective_root) if self.package_dir(identity, p) in wanted}
        )


class PluginRegistry:
    """Registry for ecosystem plugins.

    插件在模块加载时调用 PluginRegistry.register() 自动注册。
    """

    _plugins: dict[str, EcosystemPlugin] = {}  # name -> plugin
    _initialized: bool = False

    @classmethod
    def register(cls, plugin: EcosystemPlugin) -> None:
        """Register a plugin by its ecosystem name (prevents duplicates)."""
        name = plugin.info.name
        if name not in cls._plugins:
            cls._plugins[name] = plugin

    @classmethod
    def _ensure_initialized(cls) -> None:
        """Ensure all built-in plugins are loaded."""
        if cls._initialized:
            return
        cls._initialized = True

        import importlib
        for module_name in ("gitix.plugins.golang", "gitix.plugins.python"):
            importlib.import_module(module_name)

    @classmethod
    def get_plugin(cls, name: str) -> EcosystemPlugin | None:
        """Get a plugin by ecosystem name."""
        cls._ensure_initialized()
        return cls._plugins.get(name)

    @classmethod
    def detect_ecosystem(cls, repo_path: Path) -> EcosystemPlugin | None:
        """Detect and return the first matching plugin for a repository."""
        cls._ensure_initialized()
        for plugin in cls._plugins.values():
            if plugin.detect(repo_path):
                return plugin
        return None

    @classmethod
    def get_available_types(cls) -> list[str]:
        """Get list of available plugin type names."""
        cls._ensure_initialized()
        return list(cls._plugins.keys())

    @classmethod
    def resolve(cls, repo_path: Path, name: str | None = None) -> EcosystemPlugin:
        """
        Pick the plugin for a repository.

        Raises:
            DetectionError: unknown name, or nothing detected
        """
        if name:
            plugin = cls.get_plugin(name)
            if plugin is None:
                available = ", ".join(cls.get_available_types())
                raise DetectionError(f'Unknown ecosystem "{name}" (available: {available})')
            return plugin

        plugin = cls.detect_ecosystem(repo_path)
        if plugin is None:
            raise DetectionError(
                f"Unable to detect the ecosystem of {repo_path}; pass --ecosystem"
            )
        return plugin

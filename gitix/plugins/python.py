"""Python ecosystem plugin.

Packages are directories holding an ``__init__.py``, named by their
dotted path relative to the root. A root that is itself a package is
named after its directory. The snapshot is put on ``PYTHONPATH``.
"""

import os
from pathlib import Path

from gitix.plugins.base import (
    EcosystemInfo,
    EcosystemPlugin,
    PluginRegistry,
    prepend_env_path,
)


DEFAULT_FLOW = """
- parallel:
{% if packages %}
    - run:
        name: build
        command: python -m compileall -q -l {{ _dirs_ }}
{% endif %}
{% if files %}
    - run:
        name: vet
        command: python -m pyflakes {{ _files_ }}
    - run:
        name: fmt
        command: python -m black --check --quiet {{ _files_ }}
{% endif %}
{% if packages %}
- run:
    name: test collect
    description: Collecting tests (but not running them)
    command: |
      python -m pytest --collect-only -q {{ _trees_ }} || test $? -eq 5
{% endif %}
"""

# Directories never searched for packages
SKIP_DIRS = {".git", ".hg", ".tox", ".venv", "venv", "node_modules", "__pycache__", "build", "dist"}


class PythonPlugin(EcosystemPlugin):
    """Plugin for Python ecosystem."""

    @property
    def info(self) -> EcosystemInfo:
        return EcosystemInfo(
            name="python",
            config_files=["pyproject.toml", "setup.py", "setup.cfg"],
            default_path_spec=["*.py", ":(exclude)vendor/"],
        )

    @property
    def default_flow(self) -> str:
        return DEFAULT_FLOW

    def root_identity(self, repo_path: Path) -> str:
        return repo_path.resolve().name

    def effective_root(self, work_dir: Path, identity: str) -> Path:
        return work_dir / identity

    def activate(self, work_dir: Path, effective_root: Path) -> None:
        prepend_env_path("PYTHONPATH", str(effective_root))

    def list_packages(self, effective_root: Path) -> list[str]:
        packages = []
        for dirpath, dirnames, filenames in os.walk(effective_root):
            dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS and not d.endswith(".egg-info")]
            if "__init__.py" not in filenames:
                continue
            rel = Path(dirpath).relative_to(effective_root)
            if rel == Path("."):
                packages.append(effective_root.name)
            else:
                packages.append(".".join(rel.parts))
        return packages

    def package_dir(self, identity: str, package: str) -> str:
        if package == identity:
            return "."
        return package.replace(".", "/")


# 自动注册
PluginRegistry.register(PythonPlugin())

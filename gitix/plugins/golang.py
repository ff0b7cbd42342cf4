"""Go ecosystem plugin.

Packages are Go import paths as reported by ``go list``; the snapshot
is placed under ``<work>/src/<import path>`` and ``GOPATH`` is extended
so the toolchain resolves the root package inside it.
"""

from pathlib import Path

from gitix.plugins.base import (
    EcosystemInfo,
    EcosystemPlugin,
    PluginRegistry,
    prepend_env_path,
    run_query,
)


DEFAULT_FLOW = """
- parallel:
{% if packages %}
    - run:
        name: build
        command: go build {{ _packages_ }}
    - run:
        name: vet
        command: go vet {{ _packages_ }}
{% endif %}
{% if files %}
    - run:
        name: fmt
        command: test -z "$(gofmt -l {{ _files_ }})"
{% endif %}
{% if packages %}
- run:
    name: test compile
    description: Compiling and initializing tests (but not running them)
    command: |
      go test -run non-existent-test-name-!!! {{ _packages_ }}
{% endif %}
"""


class GoPlugin(EcosystemPlugin):
    """Plugin for Go ecosystem."""

    @property
    def info(self) -> EcosystemInfo:
        return EcosystemInfo(
            name="go",
            config_files=["go.mod"],
            default_path_spec=["*.go", ":(exclude)vendor/"],
        )

    @property
    def default_flow(self) -> str:
        return DEFAULT_FLOW

    def root_identity(self, repo_path: Path) -> str:
        return run_query(["go", "list", "-e", "."], repo_path).strip()

    def effective_root(self, work_dir: Path, identity: str) -> Path:
        return work_dir / "src" / identity

    def activate(self, work_dir: Path, effective_root: Path) -> None:
        prepend_env_path("GOPATH", str(work_dir))

    def list_packages(self, effective_root: Path) -> list[str]:
        return run_query(["go", "list", "./..."], effective_root).split()

    def package_dir(self, identity: str, package: str) -> str:
        if package == identity:
            return "."
        prefix = identity + "/"
        if package.startswith(prefix):
            return package[len(prefix):]
        return package


# 自动注册
PluginRegistry.register(GoPlugin())

"""
Tests for ecosystem plugins.
"""

import os

import pytest

from gitix.errors import DetectionError
from gitix.plugins import PluginRegistry
from gitix.plugins.golang import GoPlugin
from gitix.plugins.python import PythonPlugin


class TestGoPlugin:
    """Go import paths and GOPATH layout."""

    def test_package_dir(self):
        plugin = GoPlugin()
        assert plugin.package_dir("github.com/acme/tool", "github.com/acme/tool") == "."
        assert plugin.package_dir("github.com/acme/tool", "github.com/acme/tool/lib/util") == "lib/util"

    def test_effective_root_mirrors_import_path(self, tmp_path):
        assert GoPlugin().effective_root(tmp_path, "github.com/acme/tool") == (
            tmp_path / "src" / "github.com" / "acme" / "tool"
        )

    def test_activate_prepends_gopath(self, tmp_path, isolated_env):
        isolated_env.setenv("GOPATH", "/home/user/go")
        GoPlugin().activate(tmp_path, tmp_path / "src" / "x")
        assert os.environ["GOPATH"] == os.pathsep.join([str(tmp_path), "/home/user/go"])

    def test_changed_packages(self, tmp_path, monkeypatch):
        plugin = GoPlugin()
        monkeypatch.setattr(
            plugin,
            "list_packages",
            lambda root: ["example.com/m", "example.com/m/a", "example.com/m/a/b", "example.com/m/c"],
        )
        assert plugin.changed_packages("example.com/m", tmp_path, [".", "a/b", "gone"]) == [
            "example.com/m", "example.com/m/a/b",
        ]

    def test_detect(self, tmp_path):
        assert not GoPlugin().detect(tmp_path)
        (tmp_path / "go.mod").write_text("module example.com/m\n")
        assert GoPlugin().detect(tmp_path)


class TestPythonPlugin:
    """Python packages are directories with __init__.py."""

    def test_list_packages(self, tmp_path):
        root = tmp_path / "proj"
        for rel in ("pkg/__init__.py", "pkg/sub/__init__.py", "scripts/run.py",
                    ".venv/lib/__init__.py", "build/lib/__init__.py"):
            (root / rel).parent.mkdir(parents=True, exist_ok=True)
            (root / rel).write_text("")

        assert sorted(PythonPlugin().list_packages(root)) == ["pkg", "pkg.sub"]

    def test_root_package(self, tmp_path):
        root = tmp_path / "proj"
        root.mkdir()
        (root / "__init__.py").write_text("")
        plugin = PythonPlugin()
        assert plugin.list_packages(root) == ["proj"]
        assert plugin.package_dir(plugin.root_identity(root), "proj") == "."

    def test_package_dir(self):
        assert PythonPlugin().package_dir("proj", "pkg.sub") == "pkg/sub"


class TestPluginRegistry:
    """Plugin lookup and detection."""

    def test_available(self):
        assert {"go", "python"} <= set(PluginRegistry.get_available_types())

    def test_resolve_by_name(self, tmp_path):
        assert PluginRegistry.resolve(tmp_path, "go").info.name == "go"

    def test_resolve_detects(self, tmp_path):
        (tmp_path / "setup.py").write_text("")
        assert PluginRegistry.resolve(tmp_path).info.name == "python"

    def test_nothing_detected(self, tmp_path):
        with pytest.raises(DetectionError, match="--ecosystem"):
            PluginRegistry.resolve(tmp_path)

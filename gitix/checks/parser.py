"""
Step-tree parser

Turns a decoded document into a check tree. The document is a list of
entries; each entry is one of

    - [entries...]               (serial group)
    - serial: [entries...]
    - parallel: [entries...]
    - run: {name, description?, command}

Errors carry the location of the offending entry, e.g.
``[0].parallel[1].run``.
"""

from typing import Any

from gitix.checks.tree import Check, Leaf, Parallel, Serial
from gitix.errors import ConfigError

GROUP_KEYS = ("serial", "parallel")
RUN_KEY = "run"
KNOWN_KEYS = GROUP_KEYS + (RUN_KEY,)


class CheckParser:
    """Parser for decoded step-tree documents."""

    def parse(self, node: Any, path: str = "") -> Check:
        """
        Parse one entry (or the whole document) into a check.

        Raises:
            ConfigError: the entry does not have one of the known shapes
        """
        if node is None:
            return Serial(())
        if isinstance(node, list):
            return self._parse_group(Serial, node, path)
        if isinstance(node, dict):
            return self._parse_entry(node, path)
        raise ConfigError(f"{path or 'document'}: expected a list or a mapping, got {type(node).__name__}")

    def _parse_group(self, kind: type, items: Any, path: str) -> Check:
        if items is None:
            return kind(())
        if not isinstance(items, list):
            raise ConfigError(f"{path}: expected a list of checks, got {type(items).__name__}")
        return kind(tuple(self.parse(item, f"{path}[{i}]") for i, item in enumerate(items)))

    def _parse_entry(self, node: dict, path: str) -> Check:
        keys = [key for key in node if key in KNOWN_KEYS]
        unknown = [str(key) for key in node if key not in KNOWN_KEYS]
        if unknown:
            raise ConfigError(f"{path or 'document'}: unknown key(s) {', '.join(unknown)}")
        if len(keys) != 1:
            raise ConfigError(
                f"{path or 'document'}: expected exactly one of {', '.join(KNOWN_KEYS)}"
            )

        key = keys[0]
        sub_path = f"{path}.{key}" if path else key
        if key == "serial":
            return self._parse_group(Serial, node[key], sub_path)
        if key == "parallel":
            return self._parse_group(Parallel, node[key], sub_path)
        return self._parse_run(node[key], sub_path)

    def _parse_run(self, spec: Any, path: str) -> Leaf:
        if not isinstance(spec, dict):
            raise ConfigError(f"{path}: expected a mapping with name and command")

        unknown = [str(key) for key in spec if key not in ("name", "description", "command")]
        if unknown:
            raise ConfigError(f"{path}: unknown key(s) {', '.join(unknown)}")

        name = spec.get("name")
        command = spec.get("command")
        description = spec.get("description") or ""
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"{path}: missing name")
        if not isinstance(command, str) or not command.strip():
            raise ConfigError(f"{path}: missing command for {name!r}")
        if not isinstance(description, str):
            raise ConfigError(f"{path}: description of {name!r} must be text")

        return Leaf(name=name, command=command, description=description)

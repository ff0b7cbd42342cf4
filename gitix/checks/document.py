"""
Step-tree document loading

Reads the document, renders it as a Jinja2 template with the
workspace's variables, decodes the result as YAML and parses it into
a check tree. Every failure becomes a ConfigError; once rendering has
succeeded the error carries the rendered text.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import jinja2
import yaml

from gitix.checks.parser import CheckParser
from gitix.checks.tree import Check
from gitix.errors import ConfigError

logger = logging.getLogger(__name__)

_environment = jinja2.Environment(
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)


def read_document(path: Optional[Path], default: str) -> str:
    """
    Read a document from ``path``, or return ``default`` when no path is given.

    Raises:
        ConfigError: the file cannot be read
    """
    if path is None:
        return default
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f'Unable to read config file "{path}": {e}') from e


def render_document(source: str, data: dict[str, Any]) -> str:
    """
    Render the document template.

    Raises:
        ConfigError: template syntax error or undefined variable
    """
    try:
        return _environment.from_string(source).render(**data)
    except jinja2.TemplateError as e:
        raise ConfigError(f"Unable to render config file: {e}") from e


def decode_document(rendered: str) -> Any:
    """
    Decode rendered YAML.

    Raises:
        ConfigError: the text is not valid YAML
    """
    try:
        return yaml.safe_load(rendered)
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse config file: {e}", document=rendered) from e


def load_check_tree(source: str, data: dict[str, Any]) -> Check:
    """
    Render, decode and parse a step-tree document.

    Args:
        source: document template text
        data: template variables, see ``Workspace.template_data``

    Returns:
        root of the check tree

    Raises:
        ConfigError: any stage failed
    """
    rendered = render_document(source, data)
    logger.debug("Rendered config:\n%s", rendered)
    decoded = decode_document(rendered)
    try:
        return CheckParser().parse(decoded)
    except ConfigError as e:
        raise ConfigError(f"Unable to parse config file: {e}", document=rendered) from e

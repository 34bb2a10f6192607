"""Project configuration for Portatheme.

Settings are read from an optional ``portatheme.yaml`` in the project root.
Command-line options take precedence over the file.

Example ``portatheme.yaml``::

    theme: themes/blog
    parents:
      - themes/base
      - portatheme_starter
    output_dir: dist
    debounce: 0.2
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .theme import Theme

CONFIG_FILENAME = "portatheme.yaml"

DEFAULT_CONFIG = {
    "theme": ".",
    "parents": [],
    "output_dir": "dist",
    "debounce": 0.1,
}


def load_config(project_root: Path) -> dict[str, Any]:
    """Load configuration from portatheme.yaml.

    Args:
        project_root: Directory containing the config file.

    Returns:
        Dictionary of settings with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    config["parents"] = []
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    if isinstance(config["parents"], str):
        config["parents"] = [config["parents"]]
    return config


def theme_from_config(config: dict[str, Any], project_root: Path) -> Theme:
    """Create a Theme, with its parents, from configuration values.

    Relative paths are taken from ``project_root``; package names are
    looked up as installed packages first.

    Args:
        config: Settings as returned by load_config().
        project_root: Directory relative paths are resolved against.

    Returns:
        The configured leaf Theme, output directory bound.
    """
    parent = None
    for identifier in reversed(list(config.get("parents") or [])):
        parent = Theme(_project_path(str(identifier), project_root), parent)
    theme = Theme(_project_path(str(config.get("theme") or "."), project_root), parent)
    output_dir = Path(str(config.get("output_dir") or DEFAULT_CONFIG["output_dir"]))
    if not output_dir.is_absolute():
        output_dir = project_root / output_dir
    theme.output_to(str(output_dir), debounce=float(config.get("debounce", 0.1)))
    return theme


def _project_path(identifier: str, project_root: Path) -> str:
    """Anchor path-like identifiers at the project root; leave package names alone."""
    candidate = project_root / identifier
    if Path(identifier).is_absolute() or not candidate.exists():
        return identifier
    return str(candidate)

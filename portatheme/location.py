"""Theme location resolution.

A theme is named either by an installed Python package or by a folder path.
Package lookup is tried first; anything that is not an importable package is
treated as a path relative to the current working directory.

Because packages win, a folder named like an importable module (``email``,
``html``, ``test`` or an installed package) resolves to that module. Name such
a folder with a path, for example ``"./email"``, to get the folder instead.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path


def resolve_location(identifier: str) -> Path:
    """Resolve a theme identifier to an absolute directory.

    Args:
        identifier: Package name (e.g. ``"my_theme"``) or folder path.
            A bare name that is also importable resolves to the package.

    Returns:
        Absolute path to the theme. The path is not checked for existence.

    Examples:
        >>> resolve_location("themes/base")  # doctest: +SKIP
        PosixPath('/home/me/site/themes/base')
    """
    package_dir = _package_location(identifier)
    if package_dir is not None:
        return package_dir
    return Path(identifier).resolve()


def _package_location(name: str) -> Path | None:
    """Return the directory of an installed package or module, if any."""
    if not name or "/" in name or "\\" in name:
        return None
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError):
        return None
    if spec is None:
        return None
    if spec.submodule_search_locations:
        return Path(next(iter(spec.submodule_search_locations))).resolve()
    if spec.origin and spec.has_location:
        return Path(spec.origin).resolve().parent
    return None

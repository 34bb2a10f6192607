"""Portatheme: inheritable themes for static site generators.

A theme is a folder of layouts, Sass, scripts and static assets. Themes can
inherit from other themes; layouts missing from a theme are looked up in its
parents, and parent stylesheets and scripts can be imported by folder name.

The main entry point is the Theme class. The CLI module wraps it with
commands for building, watching and rendering pages.
"""

from .errors import (
    AliasConflict,
    BuildTaskError,
    InvalidOutputPath,
    NoLayoutFound,
    NoOutputDirectory,
    PageOutsideOutput,
    ThemeError,
)
from .theme import Theme

__all__ = [
    "AliasConflict",
    "BuildTaskError",
    "InvalidOutputPath",
    "NoLayoutFound",
    "NoOutputDirectory",
    "PageOutsideOutput",
    "Theme",
    "ThemeError",
    "__version__",
]
__version__ = "0.1.0"

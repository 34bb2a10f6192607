"""Template rendering for Portatheme.

This module uses Jinja2 to render page layouts. Layouts live in each
theme's ``templates/`` folder as ``<layout>.jinja``. When a theme does not
have a layout, the search falls back to its parent, then the grandparent,
and so on.

Key class:
- TemplateResolver: Finds the first layout in a chain and renders it.

A layout that exists but fails to render stops the search: the error is
raised as-is instead of being mistaken for a missing layout.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .errors import NoLayoutFound

DEFAULT_LAYOUT = "default"
TEMPLATE_EXTENSION = ".jinja"


def layout_filename(layout: str) -> str:
    """Return the file name of a layout, e.g. ``default.jinja``."""
    return f"{layout}{TEMPLATE_EXTENSION}"


class TemplateResolver:
    """Layout lookup and rendering over a theme chain.

    Attributes:
        chain: Theme directories, leaf first.
    """

    def __init__(self, chain: Sequence[Path]):
        self.chain = tuple(chain)

    def render(self, data: dict[str, Any] | None = None, layout: str = DEFAULT_LAYOUT) -> str:
        """Render a layout with the given data.

        Args:
            data: Variables to make available in the template.
            layout: Layout name without extension.

        Returns:
            Rendered HTML string.

        Raises:
            NoLayoutFound: If no theme in the chain has the layout.
            jinja2.TemplateError: If the layout fails to compile or render.
        """
        filename = layout_filename(layout)
        last = len(self.chain) - 1
        for index, location in enumerate(self.chain):
            if not (location / "templates" / filename).is_file():
                if index == last:
                    raise NoLayoutFound(layout, filename)
                continue
            env = self._environment(self.chain[index:])
            return env.get_template(filename).render(**(data or {}))
        raise NoLayoutFound(layout, filename)

    @staticmethod
    def _environment(chain: Sequence[Path]) -> Environment:
        """Build an environment whose includes fall back through ``chain``."""
        return Environment(
            loader=FileSystemLoader([location / "templates" for location in chain]),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
        )

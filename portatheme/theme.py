"""Theme class for Portatheme.

A Theme stores where a theme lives and the chain of parent themes it
inherits from, and compiles pages and assets from that chain.

Example::

    base = Theme("themes/base")
    blog = Theme("themes/blog", base)
    blog.output_to("dist")
    await blog.compile_page("index.html", {"body": "Hello"})
    await blog.build()
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from .chain import build_chain
from .errors import InvalidOutputPath, NoOutputDirectory, PageOutsideOutput
from .location import resolve_location
from .pipeline import BuildPipeline, compile_theme
from .templates import DEFAULT_LAYOUT, TemplateResolver


class Theme:
    """A theme and its inheritance chain.

    Attributes:
        location: Folder containing the theme.
        chain: The theme's folder followed by every ancestor's folder.
        parents: Folders of the ancestors only, nearest first.
        dest: Output folder, or None until output_to() is called.
        compiler: Build pipeline, or None until output_to() is called.
    """

    def __init__(self, location: str, parent: Theme | None = None):
        """Create a new theme.

        Args:
            location: Package name or folder containing the theme.
            parent: Theme to inherit from.
        """
        self.location: Path = resolve_location(location)
        self.chain: tuple[Path, ...] = build_chain(self.location, parent)
        self.parents: tuple[Path, ...] = self.chain[1:]
        self.dest: Path | None = None
        self.compiler: BuildPipeline | None = None

    def __repr__(self) -> str:
        return f"Theme({str(self.location)!r}, parents={len(self.parents)})"

    def output_to(self, location: str, debounce: float = 0.1) -> None:
        """Set the output directory for builds and pages.

        Args:
            location: Absolute path, or a path relative to the working directory.
            debounce: Seconds used to coalesce file changes while watching.

        Raises:
            InvalidOutputPath: If ``location`` is not a string.
        """
        if not isinstance(location, str):
            raise InvalidOutputPath("Theme.output_to(): path must be a string.")
        path = Path(location)
        self.dest = path if path.is_absolute() else Path.cwd() / path
        self.compiler = compile_theme(self.chain, self.dest, debounce=debounce)

    def _require_compiler(self, operation: str) -> BuildPipeline:
        if self.compiler is None or self.dest is None:
            raise NoOutputDirectory(operation)
        return self.compiler

    def page_path(self, dest: str) -> Path:
        """Return where compile_page() writes ``dest``.

        ``dest`` is always taken relative to the output directory: a leading
        root or drive is dropped, so ``"/about/index.html"`` lands in
        ``<dest>/about/index.html``.

        Raises:
            NoOutputDirectory: If output_to() has not been called.
            PageOutsideOutput: If ``..`` segments climb out of the output directory.
        """
        self._require_compiler("page_path")
        relative = Path(dest)
        if relative.anchor:
            relative = relative.relative_to(relative.anchor)
        output_path = self.dest / relative
        if not output_path.resolve().is_relative_to(self.dest.resolve()):
            raise PageOutsideOutput(dest)
        return output_path

    def compile_string(
        self, data: dict[str, Any] | None = None, layout: str | None = None
    ) -> str:
        """Render a theme layout to a string.

        Args:
            data: Variables passed to the template.
            layout: Theme layout to use; defaults to ``"default"``.

        Returns:
            Rendered HTML string.

        Raises:
            NoLayoutFound: If no theme in the chain has the layout.
            jinja2.TemplateError: If the layout fails to render.
        """
        return TemplateResolver(self.chain).render(data or {}, layout or DEFAULT_LAYOUT)

    async def compile_page(
        self,
        dest: str,
        data: dict[str, Any] | None = None,
        layout: str | None = None,
    ) -> None:
        """Render a layout and write it below the output directory.

        Args:
            dest: Path relative to the output directory to write to.
            data: Variables passed to the template.
            layout: Theme layout to use; defaults to ``"default"``.

        Raises:
            NoOutputDirectory: If output_to() has not been called.
            PageOutsideOutput: If ``dest`` climbs out of the output directory.
        """
        self._require_compiler("compile_page")
        output_path = self.page_path(dest)
        html = self.compile_string(data, layout)
        await asyncio.to_thread(_write_page, output_path, html)

    async def build(self) -> None:
        """Run the asset build once.

        Raises:
            NoOutputDirectory: If output_to() has not been called.
            BuildTaskError: If a build task fails.
        """
        compiler = self._require_compiler("build")
        await compiler()

    async def build_and_watch(self) -> None:
        """Run the asset build, then rebuild parts of it as files change.

        Raises:
            NoOutputDirectory: If output_to() has not been called.
            BuildTaskError: If the initial build fails.
        """
        compiler = self._require_compiler("build_and_watch")
        await compiler(watch=True)


def _write_page(output_path: Path, html: str) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")

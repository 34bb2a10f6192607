"""Stylesheet compilation for Portatheme.

A child theme's ``scss/index.scss`` may import the Sass tree of any parent
theme by that parent's folder name, without knowing where the parent lives
on disk::

    @import "parent";            // parent/scss/index.scss
    @import "parent/variables";  // parent/scss/_variables.scss

The alias table is rebuilt from the chain on every compile, and the import
hook is handed to libsass as a custom importer.

Key components:
- StyleConfig: Alias table plus the libsass importer built from it.
- build_style_config: Build a StyleConfig for a chain (None without parents).
- compile_stylesheet: Compile one entry point to a CSS file.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import sass

from .errors import AliasConflict

SASS_EXTENSIONS = (".scss", ".sass")


@dataclass(frozen=True)
class StyleConfig:
    """Sass import aliases for a theme chain.

    Attributes:
        aliases: Parent folder name mapped to that parent's theme directory.
    """

    aliases: dict[str, Path] = field(default_factory=dict)

    def sass_dir(self, name: str) -> Path:
        """Return the Sass root for an alias."""
        return self.aliases[name] / "scss"

    def resolve(self, path: str) -> Path | None:
        """Resolve an ``@import`` target through the alias table.

        Args:
            path: Import path as written in the stylesheet.

        Returns:
            Path to the Sass file, or None if the import is not an alias or
            no matching file exists.
        """
        name, _, rest = path.replace("\\", "/").partition("/")
        if name not in self.aliases:
            return None
        root = self.sass_dir(name)
        target = root / rest if rest else root / "index"
        for candidate in _partial_candidates(target):
            if candidate.is_file():
                return candidate
        return None

    def importer(self, path: str, prev: str | None = None):
        """libsass importer hook; returns None to fall through to libsass."""
        resolved = self.resolve(path)
        if resolved is None:
            return None
        return [(str(resolved), resolved.read_text(encoding="utf-8"))]

    @property
    def importers(self) -> list[tuple]:
        return [(0, self.importer)]


def _partial_candidates(target: Path) -> list[Path]:
    if target.suffix in SASS_EXTENSIONS:
        return [target, target.with_name(f"_{target.name}")]
    candidates = []
    for base in (target, target / "index"):
        for ext in SASS_EXTENSIONS:
            candidates.append(base.with_name(f"{base.name}{ext}"))
            candidates.append(base.with_name(f"_{base.name}{ext}"))
    return candidates


def parent_aliases(chain: Iterable[Path]) -> dict[str, Path]:
    """Map each parent theme's folder name to its directory.

    The first chain entry is the theme itself and never gets an alias.

    Raises:
        AliasConflict: If two different parent directories share a name.
    """
    aliases: dict[str, Path] = {}
    for location in list(chain)[1:]:
        existing = aliases.get(location.name)
        if existing is not None and existing != location:
            raise AliasConflict(location.name, existing, location)
        aliases[location.name] = location
    return aliases


def build_style_config(chain: Iterable[Path]) -> StyleConfig | None:
    """Create a Sass config tuned to the theme chain.

    Args:
        chain: Theme directories, leaf first.

    Returns:
        StyleConfig with one alias per parent theme, or None when the theme
        has no parents and needs no special configuration.
    """
    chain = list(chain)
    if len(chain) < 2:
        return None
    return StyleConfig(aliases=parent_aliases(chain))


def compile_stylesheet(
    source: Path, dest: Path, config: StyleConfig | None = None
) -> None:
    """Compile a Sass entry point to CSS.

    Args:
        source: Entry stylesheet, usually ``scss/index.scss``.
        dest: CSS file to write.
        config: Alias config from build_style_config(), if any.

    Raises:
        sass.CompileError: If the stylesheet does not compile.
    """
    options = {
        "filename": str(source),
        "include_paths": [str(source.parent)],
        "output_style": "expanded",
    }
    if config is not None:
        options["importers"] = config.importers
    css = sass.compile(**options)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(css, encoding="utf-8")

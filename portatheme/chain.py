"""Theme chain helpers for Portatheme.

A theme chain is the ordered tuple of theme directories a theme draws from:
the theme itself first, then its parent, grandparent and so on. This module
builds chains and derives the file sets the build process works on.

Key functions:
- build_chain: Build a chain from a theme directory and an optional parent.
- watch_paths: Glob patterns per asset category, in chain order.
- iter_assets: One merged stream of static assets across the chain.
- glob_files: Default file source used by iter_assets.
- match_glob: Match a path against one of the watch patterns.
"""

from __future__ import annotations

import glob
import os
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from functools import lru_cache
from itertools import chain as concat
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .theme import Theme

ThemeChain = tuple[Path, ...]


@dataclass(frozen=True)
class AssetFile:
    """A static file found in a theme.

    Attributes:
        path: Absolute path to the source file.
        relative: Path relative to the theme directory the file came from.
    """

    path: Path
    relative: Path


@dataclass
class WatchPaths:
    """Glob patterns the build watches, grouped by category.

    Attributes:
        assets: Static assets. The copy task re-runs when these change.
        styles: Sass sources. The stylesheet task re-runs when these change.
        scripts: JavaScript sources. The script task re-runs when these change.
    """

    assets: list[str] = field(default_factory=list)
    styles: list[str] = field(default_factory=list)
    scripts: list[str] = field(default_factory=list)


FileSource = Callable[[list[str], Path], Iterable[AssetFile]]


def build_chain(location: Path, parent: Theme | None = None) -> ThemeChain:
    """Build the chain for a theme.

    Args:
        location: Resolved directory of the theme.
        parent: Optional parent theme; its whole chain is inherited.

    Returns:
        Tuple of theme directories, leaf first.
    """
    if parent is None:
        return (location,)
    return (location, *parent.chain)


def asset_patterns(location: Path) -> list[str]:
    """Return the static asset patterns for a single theme directory.

    The directory part is escaped, so ``[``, ``*`` and ``?`` in a theme path match
    themselves.
    """
    root = Path(glob.escape(str(location)))
    return [str(root / "*"), str(root / "assets" / "**")]


def watch_paths(chain: Iterable[Path]) -> WatchPaths:
    """Create the glob patterns to watch for each category.

    Args:
        chain: Theme directories, leaf first.

    Returns:
        WatchPaths with one set of patterns per theme, in chain order.
    """
    paths = WatchPaths()
    for location in chain:
        paths.assets.extend(asset_patterns(location))
        root = Path(glob.escape(str(location)))
        paths.styles.append(str(root / "scss" / "**" / "*.scss"))
        paths.scripts.append(str(root / "js" / "**" / "*.js"))
    return paths


def glob_files(patterns: list[str], base: Path) -> Iterator[AssetFile]:
    """Expand glob patterns into files relative to ``base``.

    ``**`` matches any depth. Directories are skipped and a file matched by
    more than one pattern is yielded once.

    Args:
        patterns: Glob patterns to expand.
        base: Directory that relative paths are computed against.

    Yields:
        AssetFile for each matched file.
    """
    seen: set[Path] = set()
    for pattern in patterns:
        for match in sorted(glob.glob(pattern, recursive=True)):
            path = Path(match)
            if path in seen or not path.is_file():
                continue
            seen.add(path)
            yield AssetFile(path=path, relative=path.relative_to(base))


def iter_assets(
    chain: Iterable[Path], source: FileSource = glob_files
) -> Iterator[AssetFile]:
    """Merge the static assets of every theme in the chain into one stream.

    A single multi-root glob cannot compute relative paths per root, so each
    theme gets its own sub-stream with that theme as the base.

    Args:
        chain: Theme directories, leaf first.
        source: Callable producing files from (patterns, base).

    Returns:
        Iterator over the concatenated per-theme streams, in chain order.
    """
    return concat.from_iterable(
        source(asset_patterns(location), location) for location in chain
    )


def match_glob(pattern: str, path: str | Path) -> bool:
    """Check whether a path matches a watch pattern.

    ``*`` and ``?`` stay within one path segment; ``**`` crosses segments.
    ``[...]`` is a character class, as in :mod:`glob`, so patterns built
    from escaped directories (``site[[]1]``) match the literal path.

    Args:
        pattern: Glob pattern as produced by watch_paths().
        path: Absolute path of a changed file.

    Returns:
        True if the path matches.
    """
    return _compile_glob(_posix(pattern)).match(_posix(str(path))) is not None


def _posix(value: str) -> str:
    return value.replace(os.sep, "/") if os.sep != "/" else value


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        elif pattern[i] == "[" and _class_end(pattern, i) != -1:
            end = _class_end(pattern, i)
            parts.append(_translate_class(pattern[i + 1 : end]))
            i = end + 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts) + r"\Z")


def _class_end(pattern: str, start: int) -> int:
    """Index of the ``]`` closing the class opened at ``start``, or -1."""
    i = start + 1
    if i < len(pattern) and pattern[i] == "!":
        i += 1
    # A ']' right after the opening bracket is a member, not the end.
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    return pattern.find("]", i)


def _translate_class(body: str) -> str:
    negate = body.startswith("!")
    if negate:
        body = body[1:]
    members = "".join(
        "-" if char == "-" and 0 < k < len(body) - 1 else re.escape(char)
        for k, char in enumerate(body)
    )
    if negate:
        return f"[^/{members}]"
    return f"[{members}]"

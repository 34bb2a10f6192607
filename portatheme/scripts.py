"""Script bundling for Portatheme.

Scripts are bundled with the ``esbuild`` executable. Like stylesheets, a
child theme's scripts can import a parent theme's files by the parent's
folder name (``import menu from "parent/js/menu"``).

Key components:
- LoaderRule: One file-type rule for the bundler.
- ScriptConfig: Bundler configuration built from a chain.
- build_script_config: Build the ScriptConfig for a chain.
- find_executable: Locate a tool on PATH or in a theme's node_modules.
- bundle_script: Bundle an entry point, falling back to a minified copy.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from rjsmin import jsmin

from .errors import BuildTaskError
from .styles import parent_aliases

SCRIPT_FILENAME = "script.js"


@dataclass(frozen=True)
class LoaderRule:
    """How the bundler treats one kind of source file.

    esbuild selects loaders by file extension only, so just ``loader`` and
    ``extensions`` reach the command line. ``test`` and ``exclude`` are
    descriptive: they state the rule as path regexes for callers inspecting
    the config, and to_args() does not read them.

    Attributes:
        test: Regex for the file names the rule covers.
        loader: Bundler loader name.
        extensions: File extensions the rule maps to on the command line.
        exclude: Optional regex for paths the rule leaves alone.
    """

    test: str
    loader: str
    extensions: tuple[str, ...] = ()
    exclude: str | None = None


DEFAULT_RULES = (
    LoaderRule(
        test=r"\.jsx?$", loader="jsx", extensions=(".js", ".jsx"), exclude="node_modules"
    ),
    LoaderRule(test=r"\.json$", loader="json", extensions=(".json",)),
)


@dataclass
class ScriptConfig:
    """Bundler configuration for a theme chain.

    Attributes:
        watch: Whether the bundle is built for a watching session.
        filename: Name of the bundled output file.
        aliases: Parent folder name mapped to that parent's theme directory,
            or None for a theme without parents.
        rules: Loader rules for script and JSON sources.
    """

    watch: bool = False
    filename: str = SCRIPT_FILENAME
    aliases: dict[str, Path] | None = None
    rules: tuple[LoaderRule, ...] = DEFAULT_RULES

    def to_args(self) -> list[str]:
        """Render the config as esbuild command-line arguments.

        Watching builds keep readable output with inline source maps;
        one-shot builds are minified.
        """
        args = ["--bundle"]
        for name, location in (self.aliases or {}).items():
            args.append(f"--alias:{name}={location}")
        for rule in self.rules:
            for ext in rule.extensions:
                args.append(f"--loader:{ext}={rule.loader}")
        if self.watch:
            args.append("--sourcemap=inline")
        else:
            args.append("--minify")
        return args


def build_script_config(chain: Iterable[Path], watch: bool = False) -> ScriptConfig:
    """Generate a bundler config for a theme chain.

    Args:
        chain: Theme directories, leaf first.
        watch: Build for a watching session.

    Returns:
        ScriptConfig with one alias per parent theme, or no alias table
        when the theme has no parents.
    """
    chain = list(chain)
    aliases = parent_aliases(chain) if len(chain) > 1 else None
    return ScriptConfig(watch=watch, aliases=aliases)


def find_executable(name: str, search_roots: Iterable[Path] = ()) -> str | None:
    """Find an executable in PATH or in a theme's local node_modules.

    Args:
        name: Name of the executable (e.g. 'esbuild').
        search_roots: Directories whose ``node_modules/.bin`` is searched,
            in order, after PATH.

    Returns:
        Full path to the executable if found, None otherwise.
    """
    found = shutil.which(name)
    if found:
        return found
    for root in search_roots:
        local = root / "node_modules" / ".bin" / name
        if local.exists():
            return str(local)
    return None


def bundle_script(
    source: Path,
    dest_dir: Path,
    config: ScriptConfig,
    search_roots: Iterable[Path] = (),
) -> Path:
    """Bundle a script entry point into ``dest_dir``.

    When esbuild is not installed the entry script is minified with rjsmin
    and written unbundled, so imports are left as-is.

    Args:
        source: Entry script, usually ``js/index.js``.
        dest_dir: Output directory for the bundle.
        config: Bundler config from build_script_config().
        search_roots: Theme directories to search for a local esbuild.

    Returns:
        Path to the written bundle.

    Raises:
        BuildTaskError: If esbuild exits with an error.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / config.filename

    esbuild = find_executable("esbuild", search_roots)
    if not esbuild:
        print("esbuild not found; writing the entry script without bundling.")
        print("Install with `npm install -D esbuild` in the theme.")
        dest.write_text(jsmin(source.read_text(encoding="utf-8")), encoding="utf-8")
        return dest

    cmd = [esbuild, str(source), *config.to_args(), f"--outfile={dest}"]
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        raise BuildTaskError("scripts", result.stderr.strip() or "esbuild failed")
    return dest

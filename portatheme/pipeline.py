"""Asset build pipeline for Portatheme.

The build has one fixed shape::

    clean -> (copy | styles | scripts)

Clean removes the output directory. The other three tasks then run
concurrently; they write to disjoint parts of the output (the root,
``css/`` and ``js/``), so no locking is needed between them.

Key components:
- BuildPipeline: The build bound to a theme chain and an output directory.
- compile_theme: Factory used by Theme.output_to().

Each task is a plain method so it can also be re-run on its own by the
watcher. Failures are wrapped in BuildTaskError with the task name; output
written by tasks that already finished is left in place.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Sequence
from functools import partial
from pathlib import Path

from .chain import iter_assets, watch_paths
from .errors import BuildTaskError
from .scripts import build_script_config, bundle_script
from .styles import build_style_config, compile_stylesheet
from .watch import TaskRunner, ThemeChangeHandler, start_observer

STYLE_ENTRY = Path("scss") / "index.scss"
SCRIPT_ENTRY = Path("js") / "index.js"
STYLE_OUTPUT = Path("css") / "style.css"
SCRIPT_OUTPUT_DIR = Path("js")


class BuildPipeline:
    """Build process for a theme chain.

    Calling the pipeline returns a coroutine: ``await pipeline()`` runs one
    build, ``await pipeline(watch=True)`` builds and then watches forever.

    Attributes:
        chain: Theme directories, leaf first.
        destination: Output directory.
        debounce: Seconds used to coalesce bursts of changes while watching.
    """

    def __init__(self, chain: Sequence[Path], destination: Path, debounce: float = 0.1):
        self.chain = tuple(chain)
        self.destination = destination
        self.debounce = debounce

    @property
    def location(self) -> Path:
        return self.chain[0]

    def __call__(self, watch: bool = False):
        if watch:
            return self.watch()
        return self.run()

    async def run(self, watch: bool = False) -> None:
        """Run clean, then copy, styles and scripts concurrently.

        Args:
            watch: Build scripts for a watching session.

        Raises:
            BuildTaskError: If any task fails.
        """
        await asyncio.to_thread(self.clean)
        await asyncio.gather(
            asyncio.to_thread(self.copy),
            asyncio.to_thread(self.compile_styles),
            asyncio.to_thread(self.compile_scripts, watch),
        )

    async def watch(self) -> None:
        """Build once, then re-run individual tasks as their files change.

        Never returns on its own; cancel the task or interrupt the process
        to stop watching.
        """
        await self.run(watch=True)
        runners = {
            "assets": TaskRunner("copy", self.copy, self.debounce),
            "styles": TaskRunner("styles", self.compile_styles, self.debounce),
            "scripts": TaskRunner(
                "scripts", partial(self.compile_scripts, True), self.debounce
            ),
        }
        handler = ThemeChangeHandler(
            watch_paths(self.chain), runners, ignore=[self.destination]
        )
        observer = start_observer(self.chain, handler)
        print(f"Watching {len(self.chain)} theme folder(s) for changes...")
        try:
            await asyncio.Event().wait()
        finally:
            observer.stop()
            observer.join()
            for runner in runners.values():
                runner.cancel()

    def clean(self) -> None:
        """Remove the output directory and everything in it."""
        try:
            shutil.rmtree(self.destination)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise BuildTaskError("clean", str(exc), exc) from exc

    def copy(self) -> int:
        """Copy static assets of every theme into the output directory.

        A file provided by more than one theme is taken from the theme
        nearest the leaf.

        Returns:
            Number of files copied.
        """
        written: set[Path] = set()
        try:
            for asset in iter_assets(self.chain):
                if asset.relative in written:
                    continue
                written.add(asset.relative)
                dest = self.destination / asset.relative
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(asset.path, dest)
        except OSError as exc:
            raise BuildTaskError("copy", str(exc), exc) from exc
        return len(written)

    def compile_styles(self) -> Path:
        """Compile the theme's ``scss/index.scss`` to ``css/style.css``."""
        source = self.location / STYLE_ENTRY
        if not source.is_file():
            raise BuildTaskError("styles", f"missing stylesheet entry point {source}")
        dest = self.destination / STYLE_OUTPUT
        try:
            compile_stylesheet(source, dest, build_style_config(self.chain))
        except BuildTaskError:
            raise
        except Exception as exc:
            raise BuildTaskError("styles", str(exc), exc) from exc
        return dest

    def compile_scripts(self, watch: bool = False) -> Path:
        """Bundle the theme's ``js/index.js`` to ``js/script.js``."""
        source = self.location / SCRIPT_ENTRY
        if not source.is_file():
            raise BuildTaskError("scripts", f"missing script entry point {source}")
        try:
            return bundle_script(
                source,
                self.destination / SCRIPT_OUTPUT_DIR,
                build_script_config(self.chain, watch),
                search_roots=self.chain,
            )
        except BuildTaskError:
            raise
        except Exception as exc:
            raise BuildTaskError("scripts", str(exc), exc) from exc


def compile_theme(
    chain: Sequence[Path], destination: Path, debounce: float = 0.1
) -> BuildPipeline:
    """Create the build pipeline for a theme chain and output directory."""
    return BuildPipeline(chain, destination, debounce=debounce)

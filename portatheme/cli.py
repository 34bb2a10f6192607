"""Command-line interface for Portatheme.

This module defines the CLI commands using the Click framework.

Commands:
- build: Build theme assets into the output directory.
- watch: Build theme assets, then rebuild as files change.
- page: Render a single page with a theme layout.

Every command reads portatheme.yaml from the working directory; options
given on the command line override it.
"""

from __future__ import annotations

import asyncio
import functools
from pathlib import Path

import click
import yaml
from jinja2 import TemplateError

from . import __version__
from .config import load_config, theme_from_config
from .errors import BuildTaskError, ThemeError


def theme_options(func):
    """Attach the options shared by every command."""

    @click.option("--theme", "theme", help="Theme package or folder (overrides portatheme.yaml)")
    @click.option(
        "--parent",
        "parents",
        multiple=True,
        help="Parent theme, nearest first; repeat for grandparents",
    )
    @click.option("--output", "output_dir", help="Output directory (overrides portatheme.yaml)")
    @functools.wraps(func)
    def wrapper(theme, parents, output_dir, **kwargs):
        project_root = Path.cwd()
        config = load_config(project_root)
        if theme:
            config["theme"] = theme
        if parents:
            config["parents"] = list(parents)
        if output_dir:
            config["output_dir"] = output_dir
        try:
            return func(theme_from_config(config, project_root), **kwargs)
        except BuildTaskError as exc:
            _fail(f"Build failed in task '{exc.task}':", exc.message)
        except (ThemeError, TemplateError) as exc:
            _fail("Portatheme error:", str(exc))

    return wrapper


def _fail(headline: str, detail: str) -> None:
    click.echo(click.style(headline, fg="red", bold=True), err=True)
    click.echo(click.style(f"  {detail}", fg="yellow"), err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(version=__version__, prog_name="portatheme")
def cli():
    """Portatheme: inheritable themes for static sites."""


@cli.command()
@theme_options
def build(theme):
    """Build theme assets into the output directory."""
    asyncio.run(theme.build())
    click.echo(f"Built {theme.location.name} ({len(theme.chain)} theme(s)) into {theme.dest}")


@cli.command()
@theme_options
def watch(theme):
    """Build theme assets, then rebuild as files change."""
    try:
        asyncio.run(theme.build_and_watch())
    except KeyboardInterrupt:
        click.echo("Stopped watching.")


@cli.command()
@click.argument("dest")
@click.option(
    "--data",
    "data_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with template variables",
)
@click.option("--layout", default=None, help="Theme layout to render (default: default)")
@theme_options
def page(theme, dest: str, data_file: Path | None, layout: str | None):
    """Render a page to DEST inside the output directory."""
    data = {}
    if data_file is not None:
        with open(data_file, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise click.ClickException(f"{data_file} must contain a mapping of variables")
        data = loaded
    asyncio.run(theme.compile_page(dest, data, layout))
    click.echo(f"Wrote {theme.page_path(dest)}")


def main():
    """Entry point for the CLI application."""
    cli()

"""Exception types for Portatheme.

Every failure surfaces through one of these types (or, for template
rendering, through Jinja2's own exceptions), so callers can tell a missing
layout apart from a broken one and a build failure apart from a usage error.

Exceptions:
    ThemeError: Base class for all Portatheme errors.
    InvalidOutputPath: output_to() was given something other than a string.
    PageOutsideOutput: A page path would land outside the output directory.
    NoOutputDirectory: An operation needed an output directory that was never set.
    NoLayoutFound: No theme in the chain has the requested layout.
    AliasConflict: Two parent themes would register the same alias name.
    BuildTaskError: A build task (clean, copy, styles, scripts) failed.
"""

from __future__ import annotations

from pathlib import Path


class ThemeError(Exception):
    """Base class for Portatheme errors."""


class InvalidOutputPath(ThemeError, TypeError):
    """Raised when an output path is not a string."""


class PageOutsideOutput(ThemeError, ValueError):
    """Raised when a page path climbs out of the output directory."""

    def __init__(self, dest: str):
        self.dest = dest
        super().__init__(
            f"Theme.compile_page(): {dest!r} points outside the output directory."
        )


class NoOutputDirectory(ThemeError):
    """Raised when an operation runs before an output directory is bound."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Theme.{operation}(): no output directory has been set. "
            "Use Theme.output_to() to set one."
        )


class NoLayoutFound(ThemeError):
    """Raised when a layout is missing from every theme in the chain.

    Attributes:
        layout: Name of the requested layout.
    """

    def __init__(self, layout: str, filename: str):
        self.layout = layout
        super().__init__(f"Portatheme: no layout file named {filename} found.")


class AliasConflict(ThemeError):
    """Raised when two different parent directories share a base name."""

    def __init__(self, name: str, first: Path, second: Path):
        self.name = name
        self.first = first
        self.second = second
        super().__init__(
            f"Alias '{name}' is claimed by both {first} and {second}; "
            "rename one of the parent theme folders."
        )


class BuildTaskError(ThemeError):
    """Error raised by a build task, with task context.

    Attributes:
        task: Name of the task that failed (clean, copy, styles, scripts).
        message: Human-readable error message.
        original_error: The original exception that was caught, if any.
    """

    def __init__(
        self,
        task: str,
        message: str,
        original_error: Exception | None = None,
    ):
        self.task = task
        self.message = message
        self.original_error = original_error
        super().__init__(f"{task}: {message}")

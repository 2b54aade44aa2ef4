"""Shared utility functions for the ExpressOS scaffolder.

Provides the name-casing helpers used to derive file, symbol and route
names from user input, the project-name validator, and the Rich-based
console helpers used for every user-facing message.
"""

from __future__ import annotations

import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

# ---------------------------------------------------------------------------
# Name casing
# ---------------------------------------------------------------------------

_WORD_SEPARATORS = re.compile(r"[-_\s]+")
_LOWER_UPPER_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_KEBAB_SEPARATORS = re.compile(r"[_\s]+")


def to_pascal_case(value: str) -> str:
    """Convert ``some-thing``, ``some_thing`` or ``some thing`` to ``SomeThing``.

    Every piece is capitalized and the rest of it lower-cased, so
    ``"userProfile"`` becomes ``"Userprofile"``.  Empty pieces produced by
    consecutive separators are dropped.
    """
    return "".join(word.capitalize() for word in _WORD_SEPARATORS.split(value) if word)


def to_camel_case(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = to_pascal_case(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def to_kebab_case(value: str) -> str:
    """Convert ``someThing`` or ``some_thing`` to ``some-thing``.

    Only lower-to-upper transitions become hyphens, so an acronym such as
    ``"API"`` stays a single run (``"api"``).  Kebab input is returned
    unchanged.
    """
    hyphenated = _LOWER_UPPER_BOUNDARY.sub(r"\1-\2", value).lower()
    return _KEBAB_SEPARATORS.sub("-", hyphenated)


# ---------------------------------------------------------------------------
# Project name validation
# ---------------------------------------------------------------------------

PROJECT_NAME_MIN_LENGTH = 3
PROJECT_NAME_MAX_LENGTH = 50

RESERVED_NAMES: frozenset[str] = frozenset({
    "node_modules",
    "src",
    "dist",
    "build",
    "test",
    "tests",
    ".git",
    "package.json",
})

_PROJECT_NAME_CHARS = re.compile(r"[A-Za-z0-9_-]+")


def validate_project_name(name: str | None) -> bool | str:
    """Check a candidate project name.

    Rules are applied in order and the first failure wins.

    Returns:
        ``True`` when the name is acceptable, otherwise a human-readable
        reason string.
    """
    if not name:
        return "Project name is required"
    if not _PROJECT_NAME_CHARS.fullmatch(name):
        return "Project name can only contain letters, numbers, hyphens, and underscores"
    if len(name) < PROJECT_NAME_MIN_LENGTH:
        return f"Project name must be at least {PROJECT_NAME_MIN_LENGTH} characters long"
    if len(name) > PROJECT_NAME_MAX_LENGTH:
        return f"Project name must be at most {PROJECT_NAME_MAX_LENGTH} characters long"
    if name.lower() in RESERVED_NAMES:
        return f'"{name}" is a reserved name'
    return True


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]", soft_wrap=True)


def print_error(message: str) -> None:
    """Print a one-line red error message to standard error."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]", soft_wrap=True)


def print_file_list(files: list[Path], base: Path | None = None) -> None:
    """Print the files written by a command, relative to *base* when possible."""
    console.print("[cyan]Files generated:[/cyan]")
    for path in files:
        shown = path
        if base is not None and path.is_relative_to(base):
            shown = path.relative_to(base)
        console.print(f"  - {escape(shown.as_posix())}", soft_wrap=True)

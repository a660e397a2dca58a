"""Shared configuration, validation errors and console formatting."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from typing import IO, Any, Optional

CORE_RUNTIME = "core"
KNATIVE_RUNTIME = "knative"
STREAMING_RUNTIME = "streaming"
ALL_RUNTIMES = (CORE_RUNTIME, KNATIVE_RUNTIME, STREAMING_RUNTIME)

CONFIG_FLAG = "--config"
KUBECONFIG_FLAG = "--kubeconfig"
KUBECONFIG_FLAG_DEPRECATED = "--kube-config"
NO_COLOR_FLAG = "--no-color"
NAMESPACE_FLAG = "--namespace"
SHELL_FLAG = "--shell"
DIRECTORY_FLAG = "--directory"

# Disables ANSI colors in the text helpers; set by the root --no-color flag.
no_color: bool = os.environ.get("TERM") == "dumb" or not sys.stdout.isatty()

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


@dataclass
class Config:
    """Settings and I/O streams shared by every command."""

    name: str = "riff"
    version: str = ""
    git_sha: str = ""
    git_dirty: bool = False
    runtimes: frozenset = field(default_factory=lambda: frozenset(ALL_RUNTIMES))
    stdin: IO[str] = field(default_factory=lambda: sys.stdin)
    stdout: IO[str] = field(default_factory=lambda: sys.stdout)
    stderr: IO[str] = field(default_factory=lambda: sys.stderr)
    client: Any = None
    viper_config_file: str = ""
    kube_config_file: str = ""


@dataclass(frozen=True)
class FieldError:
    """A problem with one or more named fields or flags."""

    message: str
    paths: tuple = ()

    def __str__(self) -> str:
        return f"{self.message}: {', '.join(self.paths)}" if self.paths else self.message


class FieldErrors(tuple):
    """An immutable collection of field errors."""

    def also(self, *args) -> "FieldErrors":
        """Return a new collection with the given errors appended."""
        combined = list(self)
        for arg in args:
            combined.extend([arg] if isinstance(arg, FieldError) else arg)
        return FieldErrors(combined)

    def to_error(self) -> Optional["ValidationError"]:
        """Return a ValidationError for these errors, or None if there are none."""
        return ValidationError(self) if self else None

    def __str__(self) -> str:
        return "; ".join(map(str, self))


class ValidationError(ValueError):
    """Raised when command options fail validation."""

    def __init__(self, errors: FieldErrors) -> None:
        self.errors = errors
        super().__init__(str(errors))


def error_missing_field(field: str) -> FieldErrors:
    return FieldErrors([FieldError("missing field(s)", (field,))])


def error_invalid_value(value: Any, field: str) -> FieldErrors:
    return FieldErrors([FieldError(f"invalid value: {value}", (field,))])


def _colorize(code: str, text: str) -> str:
    return text if no_color else f"\x1b[{code}m{text}\x1b[0m"


def success_text(text: str) -> str:
    return _colorize("32", text)


def warn_text(text: str) -> str:
    return _colorize("33", text)


def error_text(text: str) -> str:
    return _colorize("31", text)


def _width(text: str) -> int:
    return len(_ANSI_ESCAPE.sub("", text))


def format_table(rows) -> str:
    """Align rows into columns separated by at least three spaces."""
    rows = [list(row) for row in rows]
    widths: dict[int, int] = {}
    for row in rows:
        for index, cell in enumerate(row[:-1]):
            widths[index] = max(widths.get(index, 0), _width(cell))
    return "".join(
        "".join(cell + " " * (widths[i] + 3 - _width(cell)) for i, cell in enumerate(row[:-1]))
        + (row[-1] if row else "")
        + "\n"
        for row in rows
    )
"""Shared pieces of the per-command builder/execution pairs."""
from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence, TypeVar

from wixcore.command_runner import CommandResult, CommandRunner
from wixcore.console import Console

from .errors import CommandError, io_errors
from .toolset import launch_failure


_B = TypeVar("_B", bound="Builder")


class Builder:
    """Mixin for frozen option dataclasses.

    ``configure`` returns an updated copy, so a builder can be chained without
    mutating the value other callers hold.
    """

    def configure(self: _B, **changes: Any) -> _B:
        return replace(self, **changes)


def resolve_path(value: Path | str | None, base: Path) -> Path | None:
    """Absolute form of ``value`` taken relative to ``base``."""

    if value is None or str(value) == "":
        return None
    path = Path(value)
    return path if path.is_absolute() else base / path


def run_tool(
    runner: CommandRunner,
    command: Sequence[str | Path],
    *,
    cwd: Path | None,
    capture_output: bool,
    console: Console,
) -> CommandResult:
    """Run an external tool and turn failures into :mod:`cargowix.errors`."""

    arguments = [str(part) for part in command]
    console.info(f"Running: {runner.format_command(arguments)}")
    try:
        result = runner.run(arguments, cwd=cwd, capture_output=capture_output)
    except OSError as exc:
        raise launch_failure(arguments[0], exc) from exc
    if result.returncode != 0:
        raise CommandError(result)
    if capture_output and result.stdout.strip():
        console.debug(result.stdout.strip())
    return result


def write_text(path: Path, text: str, console: Console) -> None:
    with io_errors(f"write '{path}'"):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    console.info(f"Wrote {path}")


__all__ = ["Builder", "resolve_path", "run_tool", "write_text"]

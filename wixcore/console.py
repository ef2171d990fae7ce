"""Leveled console output used in place of a logging framework."""
from __future__ import annotations

import sys
from typing import TextIO


class Console:
    """Simple console output handler with configurable log level.

    Levels: none < error < warn < info < debug
    Default: 'warn'
    """

    LEVELS = {
        "none": 0,
        "error": 1,
        "warn": 2,
        "info": 3,
        "debug": 4,
    }

    def __init__(
        self,
        level: str = "warn",
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        if level not in self.LEVELS:
            raise ValueError(f"Unknown console level '{level}'. Expected one of: {', '.join(self.LEVELS)}")
        self.level_name = level
        self.level = self.LEVELS[level]
        self._stdout = stdout
        self._stderr = stderr

    @classmethod
    def from_verbosity(cls, verbose: int = 0, *, quiet: bool = False) -> "Console":
        """Map a ``-v`` count onto a level, starting from the default."""

        if quiet:
            return cls("none")
        names = list(cls.LEVELS)
        index = min(cls.LEVELS["warn"] + max(verbose, 0), len(names) - 1)
        return cls(names[index])

    def enabled(self, level: str) -> bool:
        return self.level >= self.LEVELS[level]

    def _out(self) -> TextIO:
        return self._stdout or sys.stdout

    def _err(self) -> TextIO:
        return self._stderr or sys.stderr

    def error(self, message: str) -> None:
        if self.enabled("error"):
            print(f"[ERROR] {message}", file=self._err())

    def warn(self, message: str) -> None:
        if self.enabled("warn"):
            print(f"[WARN] {message}", file=self._err())

    def info(self, message: str) -> None:
        if self.enabled("info"):
            print(f"[INFO] {message}", file=self._out())

    def debug(self, message: str) -> None:
        if self.enabled("debug"):
            print(f"[DEBUG] {message}", file=self._out())


__all__ = ["Console"]

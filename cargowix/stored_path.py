"""Paths written into generated toolset sources.

The WiX preprocessor expects forward slashes regardless of the host, so every
path that ends up in a ``.wxs`` file or on a ``-d`` definition goes through
:class:`StoredPath`. Conversion from host paths is explicit and only ever
rewrites separators.
"""
from __future__ import annotations

from functools import total_ordering
from pathlib import Path, PurePath
from typing import Any
import os

from .errors import GenericError


SEPARATOR = "/"


def _ensure_utf8(text: str) -> str:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise GenericError(f"The '{text!r}' path is not valid UTF-8") from exc
    return text


@total_ordering
class StoredPath:
    """A UTF-8 path that always serializes with forward slashes."""

    __slots__ = ("_value",)

    def __init__(self, value: str | bytes | os.PathLike[str]):
        if isinstance(value, StoredPath):
            text = value.as_str()
        elif isinstance(value, bytes):
            try:
                text = value.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise GenericError(f"The {value!r} path is not valid UTF-8") from exc
        elif isinstance(value, (str, os.PathLike)):
            text = _ensure_utf8(os.fspath(value))
        else:
            raise TypeError(f"Cannot build a stored path from {type(value).__name__}")
        self._value = text.replace("\\", SEPARATOR)

    @classmethod
    def from_std_path(cls, path: PurePath) -> "StoredPath":
        """Convert a host path, keeping every segment and normalizing separators."""

        return cls(str(path))

    def to_std_path(self) -> Path:
        return Path(self._value)

    def as_str(self) -> str:
        return self._value

    def join(self, *segments: str | "StoredPath") -> "StoredPath":
        parts = [self._value.rstrip(SEPARATOR)] if self._value else []
        for segment in segments:
            text = StoredPath(segment).as_str().strip(SEPARATOR)
            if text:
                parts.append(text)
        return StoredPath(SEPARATOR.join(parts))

    @property
    def file_name(self) -> str | None:
        """Final segment, ignoring trailing separators and ``.`` segments."""

        segments = [segment for segment in self._value.split(SEPARATOR) if segment not in ("", ".")]
        if not segments or segments[-1] == "..":
            return None
        return segments[-1]

    @property
    def file_stem(self) -> str | None:
        name = self.file_name
        if name is None:
            return None
        before, dot, _ = name.rpartition(".")
        if not dot or not before:
            return name
        return before

    @property
    def extension(self) -> str | None:
        name = self.file_name
        if name is None:
            return None
        before, dot, after = name.rpartition(".")
        if not dot or not before:
            return None
        return after

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"StoredPath({self._value!r})"

    def _coerce(self, other: Any) -> str | None:
        # str values never compare equal, keeping __hash__ consistent
        if isinstance(other, StoredPath):
            return other._value
        return None

    def __eq__(self, other: Any) -> bool:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return self._value == value

    def __lt__(self, other: Any) -> bool:
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return self._value < value

    def __hash__(self) -> int:
        return hash(self._value)


def relative_to(path: Path, base: Path) -> StoredPath:
    """Stored form of ``path`` relative to ``base`` when possible, else absolute."""

    try:
        return StoredPath.from_std_path(Path(os.path.relpath(path, base)))
    except ValueError:
        # different drives on Windows
        return StoredPath.from_std_path(path)


__all__ = ["SEPARATOR", "StoredPath", "relative_to"]

"""Error taxonomy shared by every command, with a stable exit code per kind."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List

from wixcore.command_runner import CommandResult


class WixError(Exception):
    """Base class for all failures reported by cargo-wix."""

    kind = "Generic"
    code = 2

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def causes(self) -> List[str]:
        """Messages of the wrapped cause chain, outermost first."""

        chain: List[str] = []
        current = self.__cause__
        while current is not None:
            chain.append(str(current) or type(current).__name__)
            current = current.__cause__
        return chain


class CommandError(WixError):
    """An external process exited with a non-zero status."""

    kind = "Command"
    code = 1

    def __init__(self, result: CommandResult):
        message = (
            f"The '{result.program}' application failed with exit code {result.returncode}."
        )
        if not result.streamed:
            output = "\n".join(
                part.strip() for part in (result.stdout, result.stderr) if part and part.strip()
            )
            if output:
                message = f"{message} Output:\n{output}"
        else:
            message = f"{message} Output was streamed above."
        super().__init__(message)
        self.result = result

    @property
    def program(self) -> str:
        return self.result.program


class GenericError(WixError):
    kind = "Generic"
    code = 2


class WixIoError(WixError):
    """A filesystem operation failed."""

    kind = "Io"
    code = 3


class ManifestError(WixError):
    """A required field in the package manifest is missing or ambiguous."""

    kind = "Manifest"
    code = 4

    def __init__(self, field: str, message: str | None = None):
        super().__init__(
            message
            or f"No '{field}' field found in the package's manifest (Cargo.toml)"
        )
        self.field = field


class MustacheError(WixError):
    kind = "Mustache"
    code = 5


class TomlError(WixError):
    kind = "Toml"
    code = 6


class XmlError(WixError):
    kind = "Xml"
    code = 7


class XPathError(WixError):
    kind = "XPath"
    code = 8


class UuidError(WixError):
    kind = "Uuid"
    code = 9


class VersionError(WixError):
    kind = "Version"
    code = 10


def exit_code(error: BaseException) -> int:
    """Map an error onto the process exit code for its kind."""

    if isinstance(error, WixError):
        return error.code
    return GenericError.code


def describe(error: BaseException) -> List[str]:
    """Human-readable lines for ``error``: one headline plus its cause chain."""

    kind = error.kind if isinstance(error, WixError) else "Generic"
    lines = [f"Error[{kind}]: {error}"]
    if isinstance(error, WixError):
        lines.extend(f"  caused by: {cause}" for cause in error.causes())
    return lines


@contextmanager
def io_errors(action: str) -> Iterator[None]:
    """Re-raise ``OSError`` raised inside the block as :class:`WixIoError`."""

    try:
        yield
    except OSError as exc:
        raise WixIoError(f"Failed to {action}: {exc.strerror or exc}") from exc


__all__ = [
    "CommandError",
    "GenericError",
    "ManifestError",
    "MustacheError",
    "TomlError",
    "UuidError",
    "VersionError",
    "WixError",
    "WixIoError",
    "XPathError",
    "XmlError",
    "describe",
    "exit_code",
    "io_errors",
]

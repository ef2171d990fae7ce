"""``clean``: remove the WiX build outputs of a package."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple
import shutil

from wixcore.console import Console

from .builder import Builder
from .errors import io_errors
from .layout import output_dir
from .manifest import load_package


@dataclass(frozen=True)
class CleanResult:
    removed: Tuple[Path, ...] = ()


def remove_tree(path: Path, console: Console) -> bool:
    if not path.exists():
        return False
    with io_errors(f"remove '{path}'"):
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
    console.info(f"Removed {path}")
    return True


@dataclass(frozen=True)
class CleanBuilder(Builder):
    config: Path | None = None
    input: Path | None = None
    package: str | None = None

    def build(self, *, console: Console | None = None) -> "CleanExecution":
        manifest = load_package(self.input, self.package, config=self.config)
        return CleanExecution(
            target=output_dir(manifest.target_directory),
            console=console or Console(),
        )


@dataclass(frozen=True)
class CleanExecution:
    """Removes the WiX output folder under the build-output root."""

    target: Path
    console: Console = field(default_factory=Console, compare=False, repr=False)

    def run(self) -> CleanResult:
        if remove_tree(self.target, self.console):
            return CleanResult(removed=(self.target,))
        self.console.info("Nothing to clean")
        return CleanResult()


__all__ = [
    "CleanBuilder",
    "CleanExecution",
    "CleanResult",
    "remove_tree",
]

"""``purge``: remove the build outputs and the generated ``wix`` sources."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from wixcore.console import Console

from .builder import Builder
from .clean import CleanExecution, CleanResult, remove_tree
from .layout import output_dir, source_dir
from .manifest import load_package


@dataclass(frozen=True)
class PurgeBuilder(Builder):
    config: Path | None = None
    input: Path | None = None
    package: str | None = None

    def build(self, *, console: Console | None = None) -> "PurgeExecution":
        console = console or Console()
        manifest = load_package(self.input, self.package, config=self.config)
        return PurgeExecution(
            clean=CleanExecution(target=output_dir(manifest.target_directory), console=console),
            sources=source_dir(manifest.package_root),
            console=console,
        )


@dataclass(frozen=True)
class PurgeExecution:
    """Runs ``clean`` and then removes the ``wix`` source folder."""

    clean: CleanExecution
    sources: Path
    console: Console = field(default_factory=Console, compare=False, repr=False)

    def run(self) -> CleanResult:
        removed: List[Path] = list(self.clean.run().removed)
        if remove_tree(self.sources, self.console):
            removed.append(self.sources)
        return CleanResult(removed=tuple(removed))


__all__ = ["PurgeBuilder", "PurgeExecution"]

"""``sign``: sign a built installer with signtool."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from wixcore.command_runner import CommandRunner, SubprocessCommandRunner
from wixcore.console import Console

from .builder import Builder, resolve_path, run_tool
from .errors import GenericError
from .layout import output_dir
from .manifest import load_package
from .toolset import find_signer
from .wixobj import InstallerKind


TIMESTAMP_SERVERS: Dict[str, str] = {
    "comodo": "http://timestamp.comodoca.com/",
    "verisign": "http://timestamp.verisign.com/scripts/timstamp.dll",
}


def timestamp_url(value: str) -> str:
    """Expand a known timestamp server alias; anything else is used verbatim."""

    return TIMESTAMP_SERVERS.get(value.strip().lower(), value.strip())


def find_installer(folder: Path) -> Path:
    """Newest ``.msi`` in ``folder``, falling back to the newest ``.exe``."""

    for kind in (InstallerKind.MSI, InstallerKind.EXE):
        candidates = [path for path in folder.glob(f"*.{kind.extension}") if path.is_file()]
        if candidates:
            return max(candidates, key=lambda path: (path.stat().st_mtime, path.name))
    raise GenericError(
        f"No installer was found in '{folder}'. Run 'cargo wix' first or pass the "
        "'--installer' option."
    )


@dataclass(frozen=True)
class SignResult:
    installer: Path
    signer: Path


@dataclass(frozen=True)
class SignBuilder(Builder):
    bin_path: Path | None = None
    capture_output: bool = True
    config: Path | None = None
    description: str | None = None
    homepage: str | None = None
    input: Path | None = None
    installer: Path | None = None
    package: str | None = None
    product_name: str | None = None
    timestamp: str | None = None

    def build(self, *, console: Console | None = None) -> "SignExecution":
        console = console or Console()
        manifest = load_package(self.input, self.package, config=self.config)
        signer = find_signer(bin_path=self.bin_path)

        installer = resolve_path(self.installer, manifest.package_root)
        if installer is None:
            installer = find_installer(output_dir(manifest.target_directory))
        elif not installer.is_file():
            raise GenericError(f"The '{installer}' installer does not exist")

        return SignExecution(
            signer=signer,
            installer=installer,
            product_name=self.product_name
            or manifest.wix_metadata("product-name")
            or manifest.name,
            description=self.description or manifest.description,
            homepage=self.homepage or manifest.homepage,
            timestamp_url=timestamp_url(self.timestamp) if self.timestamp else None,
            capture_output=self.capture_output,
            console=console,
        )


@dataclass(frozen=True)
class SignExecution:
    signer: Path
    installer: Path
    product_name: str
    description: str | None = None
    homepage: str | None = None
    timestamp_url: str | None = None
    capture_output: bool = True
    console: Console = field(default_factory=Console, compare=False, repr=False)

    def command(self) -> List[str]:
        title = self.product_name
        if self.description:
            title = f"{title} - {self.description}"
        command = [str(self.signer), "sign", "/a", "/fd", "certHash", "/d", title]
        if self.homepage:
            command.extend(["/du", self.homepage])
        if self.timestamp_url:
            command.extend(["/t", self.timestamp_url])
        command.append(str(self.installer))
        return command

    def run(self, runner: CommandRunner | None = None) -> SignResult:
        runner = runner or SubprocessCommandRunner()
        self.console.info(f"Signing {self.installer}")
        run_tool(
            runner,
            self.command(),
            cwd=None,
            capture_output=self.capture_output,
            console=self.console,
        )
        return SignResult(installer=self.installer, signer=self.signer)


__all__ = [
    "SignBuilder",
    "SignExecution",
    "SignResult",
    "TIMESTAMP_SERVERS",
    "find_installer",
    "timestamp_url",
]

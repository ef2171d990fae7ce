"""``init``: create the ``wix`` folder with the main source and license files."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Tuple

from wixcore.console import Console

from .builder import Builder, resolve_path
from .errors import io_errors
from .layout import MAIN_SOURCE_NAME, source_dir
from .licenses import Licenses
from .manifest import load_package
from .printer.license import LicenseExecution
from .printer.wxs import WxsBuilder, WxsExecution


@dataclass(frozen=True)
class InitializeBuilder(Builder):
    banner: Path | None = None
    binaries: Tuple[Path, ...] = ()
    config: Path | None = None
    copyright_holder: str | None = None
    copyright_year: str | None = None
    description: str | None = None
    dialog: Path | None = None
    eula: Path | None = None
    force: bool = False
    help_url: str | None = None
    input: Path | None = None
    license: Path | None = None
    manufacturer: str | None = None
    output: Path | None = None
    package: str | None = None
    path_guid: str | None = None
    product_icon: Path | None = None
    product_name: str | None = None
    upgrade_guid: str | None = None

    def wxs_builder(self) -> WxsBuilder:
        return WxsBuilder(
            banner=self.banner,
            binaries=self.binaries,
            config=self.config,
            description=self.description,
            dialog=self.dialog,
            eula=self.eula,
            help_url=self.help_url,
            input=self.input,
            license=self.license,
            manufacturer=self.manufacturer,
            package=self.package,
            path_guid=self.path_guid,
            product_icon=self.product_icon,
            product_name=self.product_name,
            upgrade_guid=self.upgrade_guid,
        )

    def build(self, *, console: Console | None = None) -> "InitializeExecution":
        console = console or Console()
        manifest = load_package(self.input, self.package, config=self.config)
        destination = resolve_path(self.output, manifest.package_root) or source_dir(
            manifest.package_root
        )

        licenses = Licenses.resolve(
            manifest,
            license_path=self.license,
            eula_path=self.eula,
            dest_dir=destination,
            console=console,
        )

        license_execution = None
        source = licenses.source
        if source is not None and source.generate is not None and source.destination is not None:
            license_execution = LicenseExecution(
                template=source.generate,
                copyright_holder=self.copyright_holder or manifest.manufacturer,
                copyright_year=self.copyright_year or str(date.today().year),
                output=source.destination,
                console=console,
            )

        wxs = self.wxs_builder().build_for(
            manifest,
            licenses=licenses,
            output=destination / MAIN_SOURCE_NAME,
            console=console,
        )
        return InitializeExecution(
            destination=destination,
            force=self.force,
            wxs=wxs,
            license=license_execution,
            console=console,
        )


@dataclass(frozen=True)
class InitializeResult:
    created: Tuple[Path, ...] = ()
    existing: Tuple[Path, ...] = ()

    @property
    def already_exists(self) -> bool:
        """True when existing files blocked the run and nothing was written."""

        return bool(self.existing) and not self.created


@dataclass(frozen=True)
class InitializeExecution:
    destination: Path
    wxs: WxsExecution
    force: bool = False
    license: LicenseExecution | None = None
    console: Console = field(default_factory=Console, compare=False, repr=False)

    @property
    def files(self) -> Tuple[Path, ...]:
        outputs = [self.license.output if self.license else None, self.wxs.output]
        return tuple(path for path in outputs if path is not None)

    def run(self) -> InitializeResult:
        with io_errors(f"create the '{self.destination}' folder"):
            self.destination.mkdir(parents=True, exist_ok=True)

        existing = tuple(path for path in self.files if path.exists())
        if existing and not self.force:
            for path in existing:
                self.console.warn(
                    f"The '{path}' file already exists. Use the '--force' flag to overwrite it."
                )
            return InitializeResult(existing=existing)

        if self.license is not None:
            self.license.run()
        self.wxs.run()
        return InitializeResult(created=self.files, existing=existing)


__all__ = ["InitializeBuilder", "InitializeExecution", "InitializeResult"]

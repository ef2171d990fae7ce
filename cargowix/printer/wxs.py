"""Rendering the main WiX Source (wxs) file for a package."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple
import uuid

from wixcore.console import Console

from ..builder import Builder, resolve_path, write_text
from ..errors import UuidError
from ..licenses import License, Licenses
from ..manifest import ManifestSummary, load_package
from ..stored_path import StoredPath
from ..templates import Template


CARGO_TARGET_BIN_DIR_VARIABLE = "$(var.CargoTargetBinDir)"


def new_guid() -> str:
    return str(uuid.uuid4()).upper()


def parse_guid(value: Any, label: str) -> str:
    """Validate ``value`` and return it in the uppercase hyphenated form."""

    try:
        return str(uuid.UUID(str(value).strip())).upper()
    except ValueError as exc:
        raise UuidError(f"The {label} '{value}' is not a valid GUID") from exc


@dataclass(frozen=True, slots=True)
class Binary:
    """One executable installed into the product's ``bin`` folder."""

    index: int
    name: str
    source: StoredPath

    def to_context(self) -> Dict[str, Any]:
        return {
            "binary-index": self.index,
            "binary-name": self.name,
            "binary-source": self.source.as_str(),
        }


def _stored(value: Path | str | None) -> StoredPath | None:
    if value is None or str(value) == "":
        return None
    return StoredPath(str(value))


@dataclass(frozen=True)
class WxsBuilder(Builder):
    """Options for ``print wxs`` (and the source written by ``init``)."""

    banner: Path | None = None
    binaries: Tuple[Path, ...] = ()
    config: Path | None = None
    description: str | None = None
    dialog: Path | None = None
    eula: Path | None = None
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

    def build(self, *, console: Console | None = None) -> "WxsExecution":
        console = console or Console()
        manifest = load_package(self.input, self.package, config=self.config)
        licenses = Licenses.resolve(
            manifest,
            license_path=self.license,
            eula_path=self.eula,
            console=console,
        )
        return self.build_for(
            manifest,
            licenses=licenses,
            output=resolve_path(self.output, manifest.package_root),
            console=console,
        )

    def build_for(
        self,
        manifest: ManifestSummary,
        *,
        licenses: Licenses,
        output: Path | None,
        console: Console,
    ) -> "WxsExecution":
        """Resolve the render context for an already loaded manifest."""

        if self.binaries:
            binaries = [
                Binary(index=index, name=Path(path).stem, source=StoredPath(str(path)))
                for index, path in enumerate(self.binaries)
            ]
        else:
            binaries = [
                Binary(
                    index=index,
                    name=target.name,
                    source=StoredPath(CARGO_TARGET_BIN_DIR_VARIABLE).join(target.executable_name),
                )
                for index, target in enumerate(manifest.binaries)
            ]

        description = self.description or manifest.description
        if description is None:
            console.warn(
                "A description was not specified in the manifest or on the command line. "
                "The installer will not have a description."
            )
        help_url = self.help_url or manifest.help_url
        if help_url is None:
            console.warn(
                "A help URL could not be found (documentation, homepage, or repository). "
                "The installer will not show a support link."
            )

        upgrade_guid = self.upgrade_guid or manifest.wix_metadata("upgrade-guid")
        path_guid = self.path_guid or manifest.wix_metadata("path-guid")

        return WxsExecution(
            product_name=self.product_name
            or manifest.wix_metadata("product-name")
            or manifest.name,
            manufacturer=self.manufacturer or manifest.manufacturer,
            binaries=tuple(binaries),
            description=description,
            help_url=help_url,
            licenses=licenses,
            banner=_stored(self.banner),
            dialog=_stored(self.dialog),
            product_icon=_stored(self.product_icon),
            upgrade_guid=parse_guid(upgrade_guid, "upgrade code") if upgrade_guid else None,
            path_guid=parse_guid(path_guid, "path component GUID") if path_guid else None,
            output=output,
            console=console,
        )


@dataclass(frozen=True)
class WxsExecution:
    product_name: str
    manufacturer: str
    binaries: Tuple[Binary, ...] = ()
    description: str | None = None
    help_url: str | None = None
    licenses: Licenses = field(default_factory=lambda: Licenses(source=None, end_user=None))
    banner: StoredPath | None = None
    dialog: StoredPath | None = None
    product_icon: StoredPath | None = None
    upgrade_guid: str | None = None
    path_guid: str | None = None
    output: Path | None = None
    console: Console = field(default_factory=Console, compare=False, repr=False)

    def context(self) -> Dict[str, Any]:
        """Template context; GUIDs that were not pinned are generated afresh."""

        source: License | None = self.licenses.source
        eula: License | None = self.licenses.end_user
        binaries: List[Dict[str, Any]] = [binary.to_context() for binary in self.binaries]
        return {
            "product-name": self.product_name,
            "manufacturer": self.manufacturer,
            "upgrade-code-guid": self.upgrade_guid or new_guid(),
            "path-component-guid": self.path_guid or new_guid(),
            "binaries": binaries,
            "description": self.description,
            "help-url": self.help_url,
            "license-source": source.stored_path.as_str() if source else None,
            "license-name": source.name if source else None,
            "eula": eula.stored_path.as_str() if eula else None,
            "banner": self.banner.as_str() if self.banner else None,
            "dialog": self.dialog.as_str() if self.dialog else None,
            "product-icon": self.product_icon.as_str() if self.product_icon else None,
        }

    def render(self) -> str:
        return Template.WXS.render(self.context())

    def run(self) -> str:
        text = self.render()
        if self.output is not None:
            write_text(self.output, text, self.console)
        return text


__all__ = [
    "Binary",
    "CARGO_TARGET_BIN_DIR_VARIABLE",
    "WxsBuilder",
    "WxsExecution",
    "new_guid",
    "parse_guid",
]

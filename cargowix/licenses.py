"""Finding the license installed with the product and the EULA shown by the UI."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wixcore.console import Console

from .errors import GenericError
from .layout import LICENSE_FILE_NAME, RTF_EXTENSION
from .manifest import ManifestSummary
from .stored_path import StoredPath, relative_to
from .templates import Template


_MISSING_EULA_HINT = (
    "Could not find the project's EULA. The license agreement dialog will be excluded "
    "from the installer. Set 'package.license' to a recognized value "
    f"({', '.join(Template.license_ids())}), point 'package.license-file', "
    "'package.metadata.wix.license' or 'package.metadata.wix.eula' at an RTF file, or pass "
    "an RTF file with '--license' or '--eula'. Set 'package.metadata.wix.eula = false' to "
    "silence this warning."
)


@dataclass(frozen=True, slots=True)
class License:
    """A license file referenced by the installer source."""

    stored_path: StoredPath
    name: str | None = None
    generate: Template | None = None
    destination: Path | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> "License":
        return cls(stored_path=StoredPath(str(path)))

    @property
    def is_rtf(self) -> bool:
        extension = self.stored_path.extension
        return extension is not None and extension.lower() == RTF_EXTENSION


@dataclass(frozen=True, slots=True)
class Licenses:
    source: License | None
    end_user: License | None

    @classmethod
    def resolve(
        cls,
        manifest: ManifestSummary,
        *,
        license_path: Path | None = None,
        eula_path: Path | None = None,
        dest_dir: Path | None = None,
        console: Console | None = None,
    ) -> "Licenses":
        """Pick the source license and EULA for ``manifest``.

        ``dest_dir`` enables generating a registry license (for example MIT)
        into that folder; without it a bare license id is ignored.
        """

        source = _find_source_license(manifest, license_path, dest_dir)
        end_user = _find_end_user_license(manifest, eula_path, source, console or Console())
        return cls(source=source, end_user=end_user)


def _metadata_path(manifest: ManifestSummary, key: str, value: Any) -> License | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        if not (manifest.package_root / value).exists():
            raise GenericError(
                f"{manifest.name} specifies package.metadata.wix.{key}=\"{value}\" in its "
                "Cargo.toml, but no such file exists."
            )
        return License.from_path(value)
    raise GenericError(f"{manifest.name}'s [package.metadata.wix].{key} must be a bool or a path")


def _find_source_license(
    manifest: ManifestSummary,
    license_path: Path | None,
    dest_dir: Path | None,
) -> License | None:
    if license_path is not None:
        return License.from_path(license_path)

    configured = manifest.wix_metadata("license")
    if configured is not None:
        if configured is False:
            return None
        found = _metadata_path(manifest, "license", configured)
        if found is not None:
            return found

    if manifest.license_file:
        if not (manifest.package_root / manifest.license_file).exists():
            raise GenericError(
                f"{manifest.name} specifies license-file=\"{manifest.license_file}\" in its "
                "Cargo.toml, but no such file exists."
            )
        return License.from_path(manifest.license_file)

    template = Template.find_license(manifest.license)
    if template is not None and dest_dir is not None:
        file_name = f"{LICENSE_FILE_NAME}.{RTF_EXTENSION}"
        destination = dest_dir / file_name
        return License(
            stored_path=relative_to(destination, manifest.package_root),
            name=file_name,
            generate=template,
            destination=destination,
        )
    return None


def _find_end_user_license(
    manifest: ManifestSummary,
    eula_path: Path | None,
    source: License | None,
    console: Console,
) -> License | None:
    if eula_path is not None:
        return License.from_path(eula_path)

    configured = manifest.wix_metadata("eula")
    if configured is not None:
        if configured is False:
            return None
        found = _metadata_path(manifest, "eula", configured)
        if found is not None:
            return found

    if source is not None and source.is_rtf:
        return License(stored_path=source.stored_path)

    console.warn(_MISSING_EULA_HINT)
    return None


__all__ = ["License", "Licenses"]

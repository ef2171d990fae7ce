"""Reading the package manifest (Cargo.toml) into an immutable summary."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple
import json
import os
import re
import tomllib

import yaml

from wixcore.config_loader import load_config_file, lookup_table, merge_mappings

from .errors import GenericError, ManifestError, TomlError, VersionError, WixIoError


CARGO_MANIFEST_FILE = "Cargo.toml"
CARGO_TARGET_DIR_KEY = "CARGO_TARGET_DIR"
CONFIG_OVERLAY_KEY = "CARGO_WIX_CONFIG"
WIX_METADATA_TABLE = "package.metadata.wix"

_EMAIL_PATTERN = re.compile(r"\s*<(.*?)>\s*")
_VERSION_PATTERN = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)
_INHERITABLE_FIELDS = (
    "version",
    "authors",
    "description",
    "documentation",
    "homepage",
    "license",
    "license-file",
    "repository",
)


@dataclass(frozen=True, slots=True)
class Version:
    """A semantic version as written in the manifest."""

    major: int
    minor: int
    patch: int
    pre: str | None = None
    build: str | None = None

    @classmethod
    def parse(cls, text: str) -> "Version":
        match = _VERSION_PATTERN.match(text.strip())
        if match is None:
            raise VersionError(f"The '{text}' version is not a valid semantic version")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            pre=match.group("pre"),
            build=match.group("build"),
        )

    @property
    def wix_version(self) -> str:
        """Numeric form accepted by the Windows Installer ProductVersion."""

        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        text = self.wix_version
        if self.pre:
            text = f"{text}-{self.pre}"
        if self.build:
            text = f"{text}+{self.build}"
        return text


class TargetKind(str, Enum):
    BIN = "bin"
    EXAMPLE = "example"


@dataclass(frozen=True, slots=True)
class Target:
    """A binary artifact produced by the package."""

    name: str
    kind: TargetKind
    package: str

    @property
    def executable_name(self) -> str:
        return f"{self.name}.exe"

    def executable_path(self, bin_dir: Path) -> Path:
        if self.kind is TargetKind.EXAMPLE:
            return bin_dir / "examples" / self.executable_name
        return bin_dir / self.executable_name


@dataclass(frozen=True)
class ManifestSummary:
    """Read-only snapshot of the selected package."""

    name: str
    version: str
    manifest_path: Path
    workspace_root: Path
    target_directory: Path
    description: str | None = None
    authors: Tuple[str, ...] = ()
    license: str | None = None
    license_file: str | None = None
    homepage: str | None = None
    documentation: str | None = None
    repository: str | None = None
    targets: Tuple[Target, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def package_root(self) -> Path:
        return self.manifest_path.parent

    @property
    def binaries(self) -> Tuple[Target, ...]:
        return tuple(target for target in self.targets if target.kind is TargetKind.BIN)

    @property
    def manufacturer(self) -> str:
        """The first author with any e-mail address removed."""

        if not self.authors:
            raise ManifestError("authors")
        return _EMAIL_PATTERN.sub("", self.authors[0]).strip()

    @property
    def help_url(self) -> str | None:
        return self.documentation or self.homepage or self.repository

    def wix_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)


def resolve_manifest_path(input_path: Path | None, *, cwd: Path | None = None) -> Path:
    """Absolute path of the manifest named by ``input_path`` (a file or its folder)."""

    base = cwd or Path.cwd()
    if input_path is None:
        candidate = base / CARGO_MANIFEST_FILE
    else:
        candidate = input_path if input_path.is_absolute() else base / input_path
        if candidate.is_dir():
            candidate = candidate / CARGO_MANIFEST_FILE

    if not candidate.is_file():
        raise GenericError(f"The '{candidate}' path does not exist or it is not a file")
    if candidate.name != CARGO_MANIFEST_FILE:
        raise GenericError(
            f"The '{candidate}' path does not appear to be a package manifest. "
            f"The file name must be '{CARGO_MANIFEST_FILE}'."
        )
    return candidate.resolve()


def read_document(path: Path) -> Mapping[str, Any]:
    try:
        return load_config_file(path)
    except tomllib.TOMLDecodeError as exc:
        raise TomlError(f"Failed to parse '{path}'") from exc
    except UnicodeDecodeError as exc:
        raise TomlError(f"Failed to parse '{path}': the file is not valid UTF-8") from exc
    except OSError as exc:
        raise WixIoError(f"Failed to read '{path}': {exc.strerror or exc}") from exc


def load_overlay(config: Path | None) -> Mapping[str, Any]:
    """Settings overlay from ``config`` or the ``CARGO_WIX_CONFIG`` variable."""

    if config is None:
        raw = os.environ.get(CONFIG_OVERLAY_KEY)
        if not raw:
            return {}
        config = Path(raw)

    try:
        data = load_config_file(config)
    except tomllib.TOMLDecodeError as exc:
        raise TomlError(f"Failed to parse the '{config}' settings file") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise GenericError(f"Failed to parse the '{config}' settings file") from exc
    except OSError as exc:
        raise WixIoError(f"Failed to read '{config}': {exc.strerror or exc}") from exc
    except (TypeError, ValueError) as exc:
        raise GenericError(str(exc)) from exc

    # overlays may either mirror the metadata table or contain its keys directly
    nested = lookup_table(data, WIX_METADATA_TABLE) if "package" in data else {}
    return nested or data


def _find_workspace(manifest_path: Path, document: Mapping[str, Any]) -> Tuple[Path, Mapping[str, Any]]:
    if "workspace" in document:
        return manifest_path, document
    for parent in manifest_path.parent.parents:
        candidate = parent / CARGO_MANIFEST_FILE
        if not candidate.is_file():
            continue
        parent_document = read_document(candidate)
        if "workspace" in parent_document:
            return candidate, parent_document
    return manifest_path, document


def _workspace_members(root: Path, document: Mapping[str, Any]) -> List[Path]:
    workspace = document.get("workspace", {})
    excluded = {(root.parent / item).resolve() for item in workspace.get("exclude", [])}
    manifests: List[Path] = []
    if "package" in document:
        manifests.append(root)
    for pattern in workspace.get("members", []):
        for folder in sorted(root.parent.glob(pattern)):
            manifest = folder / CARGO_MANIFEST_FILE
            if folder.resolve() in excluded or not manifest.is_file():
                continue
            resolved = manifest.resolve()
            if resolved not in manifests:
                manifests.append(resolved)
    return manifests


def _package_name(path: Path, document: Mapping[str, Any]) -> str:
    name = document.get("package", {}).get("name")
    if not isinstance(name, str):
        raise ManifestError("name", f"No 'name' field found in the '{path}' manifest")
    return name


def _select_package(
    manifest_path: Path,
    document: Mapping[str, Any],
    package: str | None,
) -> Tuple[Path, Mapping[str, Any]]:
    if "workspace" not in document:
        if package is not None and _package_name(manifest_path, document) != package:
            raise GenericError(f"The '{package}' package was not found in '{manifest_path}'")
        return manifest_path, document

    candidates = [
        (path, document if path == manifest_path else read_document(path))
        for path in _workspace_members(manifest_path, document)
    ]
    if package is not None:
        for path, candidate in candidates:
            if _package_name(path, candidate) == package:
                return path, candidate
        raise GenericError(f"The '{package}' package was not found in the workspace")

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise ManifestError("package", "The workspace does not contain any packages")
    names = ", ".join(_package_name(path, candidate) for path, candidate in candidates)
    raise ManifestError(
        "package",
        f"The workspace contains multiple packages ({names}). Select one with the '--package' option.",
    )


def _inherit(
    package: Mapping[str, Any],
    workspace_package: Mapping[str, Any],
) -> Dict[str, Any]:
    resolved: Dict[str, Any] = dict(package)
    for key in _INHERITABLE_FIELDS:
        value = package.get(key)
        if isinstance(value, Mapping) and value.get("workspace") is True:
            if key not in workspace_package:
                raise ManifestError(
                    key, f"The '{key}' field is inherited but '[workspace.package]' does not set it"
                )
            resolved[key] = workspace_package[key]
    return resolved


def _collect_targets(name: str, package_root: Path, document: Mapping[str, Any]) -> Tuple[Target, ...]:
    targets: List[Target] = []
    bins = document.get("bin", [])
    for entry in bins:
        targets.append(Target(name=entry.get("name", name), kind=TargetKind.BIN, package=name))
    if not bins and document.get("package", {}).get("autobins", True):
        src = package_root / "src"
        if (src / "main.rs").is_file() or not (src / "lib.rs").is_file():
            targets.append(Target(name=name, kind=TargetKind.BIN, package=name))
        for extra in sorted((src / "bin").glob("*.rs")):
            targets.append(Target(name=extra.stem, kind=TargetKind.BIN, package=name))
    for entry in document.get("example", []):
        if "name" in entry:
            targets.append(Target(name=entry["name"], kind=TargetKind.EXAMPLE, package=name))
    return tuple(targets)


def _optional_string(package: Mapping[str, Any], key: str) -> str | None:
    value = package.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ManifestError(key, f"The '{key}' field must be a string")
    return value


def target_directory(workspace_root: Path) -> Path:
    raw = os.environ.get(CARGO_TARGET_DIR_KEY)
    if raw:
        return Path(raw).resolve()
    return workspace_root / "target"


def load_package(
    input_path: Path | None = None,
    package: str | None = None,
    *,
    config: Path | None = None,
) -> ManifestSummary:
    """Locate, parse, and summarize the selected package."""

    manifest_path = resolve_manifest_path(input_path)
    document = read_document(manifest_path)
    workspace_path, workspace_document = _find_workspace(manifest_path, document)
    package_path, package_document = _select_package(manifest_path, document, package)

    if "package" not in package_document:
        raise ManifestError("package")
    raw_package = package_document["package"]
    workspace_package = lookup_table(workspace_document, "workspace.package")
    resolved = _inherit(raw_package, workspace_package)

    name = _package_name(package_path, package_document)
    version = resolved.get("version")
    if not isinstance(version, str):
        raise ManifestError("version")
    authors = resolved.get("authors") or []
    if not isinstance(authors, Sequence) or isinstance(authors, str):
        raise ManifestError("authors", "The 'authors' field must be a list of strings")

    try:
        metadata = lookup_table(package_document, WIX_METADATA_TABLE)
    except TypeError as exc:
        raise ManifestError("metadata", f"The '[{WIX_METADATA_TABLE}]' entry must be a table") from exc
    overlay = load_overlay(config)
    if overlay:
        metadata = merge_mappings(metadata, overlay)

    workspace_root = workspace_path.parent
    return ManifestSummary(
        name=name,
        version=version,
        manifest_path=package_path,
        workspace_root=workspace_root,
        target_directory=target_directory(workspace_root),
        description=_optional_string(resolved, "description"),
        authors=tuple(str(author) for author in authors),
        license=_optional_string(resolved, "license"),
        license_file=_optional_string(resolved, "license-file"),
        homepage=_optional_string(resolved, "homepage"),
        documentation=_optional_string(resolved, "documentation"),
        repository=_optional_string(resolved, "repository"),
        targets=_collect_targets(name, package_path.parent, package_document),
        metadata=dict(metadata),
    )


__all__ = [
    "CARGO_MANIFEST_FILE",
    "CARGO_TARGET_DIR_KEY",
    "CONFIG_OVERLAY_KEY",
    "ManifestSummary",
    "Target",
    "TargetKind",
    "Version",
    "load_overlay",
    "load_package",
    "read_document",
    "resolve_manifest_path",
    "target_directory",
]

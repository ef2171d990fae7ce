"""The default command: build the project and link an installer with WiX.

The pipeline is strictly sequential:

1. ``cargo build`` (unless the build is skipped),
2. ``candle`` once per WiX Source file, producing one ``.wixobj`` each,
3. classification of every object file to pick the installer kind,
4. ``light`` over all object files,
5. optionally running the installer.

The first failing step aborts the run. Object files that were already written
stay in the output folder until ``clean`` removes them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Set, Tuple

from wixcore.command_runner import CommandRunner, SubprocessCommandRunner
from wixcore.config_loader import normalize_string_list
from wixcore.console import Console

from .builder import Builder, resolve_path, run_tool
from .cultures import Cultures
from .errors import GenericError, io_errors
from .layout import WIXOBJ_EXTENSION, WXS_EXTENSION, installer_stem, output_dir, source_dir
from .manifest import ManifestSummary, Target, Version, load_package
from .profile import Platform, Profile
from .stored_path import relative_to
from .toolset import CARGO, MSIEXEC, WIX_COMPILER, WIX_LINKER, find_wix_tool
from .wixobj import InstallerKind, WixObjKind


COMPILER_EXTENSIONS = ("WixUtilExtension",)
LINKER_EXTENSIONS = ("WixUIExtension", "WixUtilExtension")
BUNDLE_EXTENSION = "WixBalExtension"


@dataclass(frozen=True)
class CreateResult:
    installer: Path
    kind: InstallerKind
    objects: Tuple[Path, ...] = ()


def _flag(value: bool | None, metadata: object) -> bool:
    if value is not None:
        return value
    return bool(metadata)


def _optional_text(value: object, key: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise GenericError(f"The [package.metadata.wix].{key} value must be a string")
    return value


@dataclass(frozen=True)
class CreateBuilder(Builder):
    bin_path: Path | None = None
    capture_output: bool = True
    config: Path | None = None
    culture: str | None = None
    debug_build: bool | None = None
    includes: Tuple[Path, ...] = ()
    input: Path | None = None
    install: bool = False
    locale: Path | None = None
    name: str | None = None
    no_build: bool | None = None
    output: str | None = None
    package: str | None = None
    profile: str | None = None
    target: str | None = None
    version: str | None = None

    def _sources(self, manifest: ManifestSummary) -> Tuple[Path, ...]:
        root = manifest.package_root
        sources: List[Path] = sorted(source_dir(root).glob(f"*.{WXS_EXTENSION}"))

        if self.includes:
            includes = list(self.includes)
        else:
            try:
                includes = normalize_string_list(
                    manifest.wix_metadata("include"), field_name="[package.metadata.wix].include"
                )
            except TypeError as exc:
                raise GenericError(str(exc)) from exc
        for include in includes:
            path = resolve_path(include, root)
            if path is None or not path.is_file():
                raise GenericError(f"The '{include}' WiX Source (wxs) file does not exist")
            if path not in sources:
                sources.append(path)

        if not sources:
            raise GenericError(
                f"No WiX Source (wxs) files were found in '{source_dir(root)}'. "
                "Run 'cargo wix init' to create one or pass '--include'."
            )
        return tuple(sources)

    def build(self, *, console: Console | None = None) -> "CreateExecution":
        console = console or Console()
        manifest = load_package(self.input, self.package, config=self.config)
        root = manifest.package_root

        name = self.name or _optional_text(manifest.wix_metadata("name"), "name") or manifest.name
        version = Version.parse(
            self.version or _optional_text(manifest.wix_metadata("version"), "version") or manifest.version
        )

        culture_text = self.culture or _optional_text(manifest.wix_metadata("culture"), "culture")
        culture = Cultures.from_str(culture_text) if culture_text else Cultures.default()

        locale = resolve_path(
            self.locale or _optional_text(manifest.wix_metadata("locale"), "locale"), root
        )
        if locale is not None and not locale.is_file():
            raise GenericError(f"The '{locale}' WiX localization (wxl) file does not exist")

        profile = Profile.resolve(
            debug=_flag(self.debug_build, manifest.wix_metadata("dbg-build")),
            profile=self.profile or _optional_text(manifest.wix_metadata("profile"), "profile"),
            target=self.target or _optional_text(manifest.wix_metadata("target"), "target"),
        )
        platform = profile.platform
        bin_dir = profile.target_bin_dir(manifest.target_directory)

        no_build = _flag(self.no_build, manifest.wix_metadata("no-build"))
        if no_build:
            for target in manifest.binaries:
                executable = target.executable_path(bin_dir)
                if not executable.is_file():
                    raise GenericError(
                        f"The build was skipped but the '{executable}' binary does not exist. "
                        "Build the project first or remove the '--no-build' flag."
                    )

        out_dir = output_dir(manifest.target_directory)
        raw_output = self.output or _optional_text(manifest.wix_metadata("output"), "output")
        destination_dir, destination_name = out_dir, None
        if raw_output:
            resolved = resolve_path(raw_output, root)
            if raw_output.endswith(("/", "\\")) or resolved.is_dir():
                destination_dir = resolved
            else:
                destination_dir, destination_name = resolved.parent, resolved.name

        return CreateExecution(
            manifest=manifest,
            name=name,
            version=version,
            culture=culture,
            locale=locale,
            profile=profile,
            platform=platform,
            sources=self._sources(manifest),
            binaries=manifest.binaries,
            bin_dir=bin_dir,
            output_dir=out_dir,
            destination_dir=destination_dir,
            destination_name=destination_name,
            compiler=find_wix_tool(WIX_COMPILER, bin_path=self.bin_path),
            linker=find_wix_tool(WIX_LINKER, bin_path=self.bin_path),
            no_build=no_build,
            install=self.install,
            capture_output=self.capture_output,
            console=console,
        )


@dataclass(frozen=True)
class CreateExecution:
    manifest: ManifestSummary
    name: str
    version: Version
    culture: Cultures
    profile: Profile
    platform: Platform
    sources: Tuple[Path, ...]
    bin_dir: Path
    output_dir: Path
    destination_dir: Path
    compiler: Path
    linker: Path
    binaries: Tuple[Target, ...] = ()
    locale: Path | None = None
    destination_name: str | None = None
    no_build: bool = False
    install: bool = False
    capture_output: bool = True
    console: Console = field(default_factory=Console, compare=False, repr=False)

    @property
    def package_root(self) -> Path:
        return self.manifest.package_root

    def installer_path(self, kind: InstallerKind) -> Path:
        if self.destination_name is None:
            stem = installer_stem(self.name, self.version, self.platform)
            return self.destination_dir / f"{stem}.{kind.extension}"
        path = self.destination_dir / self.destination_name
        if not path.suffix:
            path = path.with_name(f"{path.name}.{kind.extension}")
        return path

    def object_paths(self) -> Dict[Path, Path]:
        """Object file per source. A repeated stem gets a numeric suffix."""

        paths: Dict[Path, Path] = {}
        used: Set[str] = set()
        for source in self.sources:
            name, index = source.stem, 1
            while name.lower() in used:
                index += 1
                name = f"{source.stem}-{index}"
            used.add(name.lower())
            paths[source] = self.output_dir / f"{name}.{WIXOBJ_EXTENSION}"
        return paths

    def object_path(self, source: Path) -> Path:
        return self.object_paths()[source]

    def build_command(self) -> List[str]:
        return [CARGO, "build", *self.profile.cargo_args(), "--package", self.manifest.name]

    def compile_command(self, source: Path) -> List[str]:
        root = self.package_root
        return [
            str(self.compiler),
            f"-dVersion={self.version.wix_version}",
            f"-dPlatform={self.platform.value}",
            f"-dCargoProfile={self.profile.name}",
            f"-dCargoTargetDir={relative_to(self.manifest.target_directory, root)}",
            f"-dCargoTargetBinDir={relative_to(self.bin_dir, root)}",
            "-arch",
            self.platform.value,
            *[part for extension in COMPILER_EXTENSIONS for part in ("-ext", extension)],
            "-o",
            str(self.object_path(source)),
            str(source),
        ]

    def link_command(self, objects: Sequence[Path], kind: InstallerKind) -> List[str]:
        extensions = list(LINKER_EXTENSIONS)
        if kind is InstallerKind.EXE:
            extensions.append(BUNDLE_EXTENSION)
        command = [
            str(self.linker),
            "-spdb",
            *[part for extension in extensions for part in ("-ext", extension)],
            f"-cultures:{self.culture.value}",
        ]
        if self.locale is not None:
            command.extend(["-loc", str(self.locale)])
        command.extend(["-out", str(self.installer_path(kind))])
        command.extend(str(path) for path in objects)
        return command

    def install_command(self, installer: Path, kind: InstallerKind) -> List[str]:
        if kind is InstallerKind.MSI:
            return [MSIEXEC, "/i", str(installer)]
        return [str(installer)]

    def _check_bundle_binaries(self) -> None:
        for target in self.binaries:
            executable = target.executable_path(self.bin_dir)
            if not executable.is_file():
                raise GenericError(
                    f"The bundle references the '{executable}' executable, which does not exist"
                )

    def run(self, runner: CommandRunner | None = None) -> CreateResult:
        runner = runner or SubprocessCommandRunner()

        def execute(command: List[str]) -> None:
            run_tool(
                runner,
                command,
                cwd=self.package_root,
                capture_output=self.capture_output,
                console=self.console,
            )

        if self.no_build:
            self.console.info("Skipping the build of the project")
        else:
            self.console.info(f"Building the '{self.manifest.name}' package ({self.profile.name})")
            execute(self.build_command())

        with io_errors(f"create the '{self.output_dir}' folder"):
            self.output_dir.mkdir(parents=True, exist_ok=True)

        objects: List[Path] = []
        for source in self.sources:
            self.console.info(f"Compiling {source}")
            execute(self.compile_command(source))
            objects.append(self.object_path(source))

        kinds = [WixObjKind.from_path(path) for path in objects]
        kind = InstallerKind.from_objects(kinds)
        if kind is InstallerKind.EXE:
            self._check_bundle_binaries()

        installer = self.installer_path(kind)
        with io_errors(f"create the '{installer.parent}' folder"):
            installer.parent.mkdir(parents=True, exist_ok=True)
        self.console.info(f"Linking {installer}")
        execute(self.link_command(objects, kind))

        if self.install:
            self.console.info(f"Installing {installer}")
            execute(self.install_command(installer, kind))

        return CreateResult(installer=installer, kind=kind, objects=tuple(objects))


__all__ = [
    "BUNDLE_EXTENSION",
    "CreateBuilder",
    "CreateExecution",
    "CreateResult",
]

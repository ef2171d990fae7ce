"""Build profile and target platform resolution."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List
import platform

from .errors import GenericError


RELEASE_PROFILE = "release"
DEBUG_PROFILE = "debug"


class Platform(str, Enum):
    """Installer platform as understood by the WiX toolset."""

    X86 = "x86"
    X64 = "x64"
    ARM64 = "arm64"

    @property
    def arch(self) -> str:
        """Architecture name used in installer file names."""

        return {
            Platform.X86: "i686",
            Platform.X64: "x86_64",
            Platform.ARM64: "aarch64",
        }[self]

    @classmethod
    def from_arch(cls, arch: str) -> "Platform":
        normalized = arch.strip().lower()
        if normalized in ("x86_64", "amd64", "x64"):
            return cls.X64
        if normalized in ("i386", "i586", "i686", "x86"):
            return cls.X86
        if normalized in ("aarch64", "arm64"):
            return cls.ARM64
        raise GenericError(f"Unsupported architecture '{arch}' for a Windows installer")

    @classmethod
    def from_target_triple(cls, triple: str) -> "Platform":
        return cls.from_arch(triple.split("-", 1)[0])

    @classmethod
    def host(cls) -> "Platform":
        return cls.from_arch(platform.machine())


@dataclass(frozen=True, slots=True)
class Profile:
    """Which build of the package gets packaged."""

    name: str = RELEASE_PROFILE
    target_triple: str | None = None

    @classmethod
    def resolve(
        cls,
        *,
        debug: bool = False,
        profile: str | None = None,
        target: str | None = None,
    ) -> "Profile":
        if debug:
            name = DEBUG_PROFILE
        elif profile:
            name = profile
        else:
            name = RELEASE_PROFILE
        return cls(name=name, target_triple=target or None)

    @property
    def directory_name(self) -> str:
        if self.name in ("dev", DEBUG_PROFILE):
            return DEBUG_PROFILE
        return self.name

    @property
    def platform(self) -> Platform:
        if self.target_triple:
            return Platform.from_target_triple(self.target_triple)
        return Platform.host()

    def target_bin_dir(self, target_directory: Path) -> Path:
        base = target_directory / self.target_triple if self.target_triple else target_directory
        return base / self.directory_name

    def cargo_args(self) -> List[str]:
        args: List[str] = []
        if self.name == RELEASE_PROFILE:
            args.append("--release")
        elif self.name not in ("dev", DEBUG_PROFILE):
            args.extend(["--profile", self.name])
        if self.target_triple:
            args.extend(["--target", self.target_triple])
        return args


__all__ = ["DEBUG_PROFILE", "Platform", "Profile", "RELEASE_PROFILE"]

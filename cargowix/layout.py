"""Where sources and build outputs live relative to a package."""
from __future__ import annotations

from pathlib import Path

from .profile import Platform
from .manifest import Version


WIX_SOURCE_FOLDER = "wix"
WIX_OUTPUT_FOLDER = "wix"
MAIN_SOURCE_NAME = "main.wxs"
LICENSE_FILE_NAME = "License"

WXS_EXTENSION = "wxs"
WIXOBJ_EXTENSION = "wixobj"
RTF_EXTENSION = "rtf"


def source_dir(package_root: Path) -> Path:
    """Folder holding the WiX sources created by ``init``."""

    return package_root / WIX_SOURCE_FOLDER


def output_dir(target_directory: Path) -> Path:
    """Folder under the build-output root holding objects and installers."""

    return target_directory / WIX_OUTPUT_FOLDER


def installer_stem(name: str, version: Version, platform: Platform) -> str:
    return f"{name}-{version}-{platform.arch}"


__all__ = [
    "LICENSE_FILE_NAME",
    "MAIN_SOURCE_NAME",
    "RTF_EXTENSION",
    "WIXOBJ_EXTENSION",
    "WIX_OUTPUT_FOLDER",
    "WIX_SOURCE_FOLDER",
    "WXS_EXTENSION",
    "installer_stem",
    "output_dir",
    "source_dir",
]

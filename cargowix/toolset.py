"""Locating the WiX compiler, linker, and the signer executable."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping, Sequence
import os
import shutil

from .errors import GenericError


WIX_COMPILER = "candle"
WIX_LINKER = "light"
SIGNTOOL = "signtool"
CARGO = "cargo"
MSIEXEC = "msiexec"

WIX_PATH_KEY = "WIX"
SIGNTOOL_PATH_KEY = "SIGNTOOL_PATH"
BINARY_FOLDER_NAME = "bin"

WINDOWS_KITS_ROOTS: List[Path] = [
    Path("C:/Program Files (x86)/Windows Kits/10/bin"),
    Path("C:/Program Files/Windows Kits/10/bin"),
]
"""Folders searched last for an SDK-installed ``signtool.exe``."""


def _executable_names(name: str) -> List[str]:
    return [f"{name}.exe", name]


def _in_folder(folder: Path, name: str) -> Path | None:
    for candidate in _executable_names(name):
        path = folder / candidate
        if path.is_file():
            return path
    return None


def _on_path(name: str, environ: Mapping[str, str]) -> Path | None:
    found = shutil.which(name, path=environ.get("PATH"))
    return Path(found) if found else None


def _from_explicit(name: str, path: Path, label: str) -> Path:
    if path.is_file():
        return path
    if path.is_dir():
        found = _in_folder(path, name)
        if found is not None:
            return found
    raise GenericError(
        f"The '{name}' application could not be found at the {label} '{path}'. "
        f"Check that the path points to the folder containing '{name}.exe'."
    )


def find_wix_tool(
    name: str,
    *,
    bin_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Resolve ``name`` from ``bin_path``, then PATH, then ``$WIX/bin``."""

    env = os.environ if environ is None else environ
    if bin_path is not None:
        return _from_explicit(name, bin_path, "bin path")

    found = _on_path(name, env)
    if found is not None:
        return found

    wix_root = env.get(WIX_PATH_KEY)
    if wix_root:
        found = _in_folder(Path(wix_root) / BINARY_FOLDER_NAME, name)
        if found is not None:
            return found

    raise GenericError(
        f"The '{name}' application from the WiX Toolset could not be found. "
        f"Install the WiX Toolset, add its '{BINARY_FOLDER_NAME}' folder to PATH, set the "
        f"'{WIX_PATH_KEY}' environment variable, or pass the '--bin-path' option."
    )


def _sdk_candidates(roots: Iterable[Path]) -> List[Path]:
    candidates: List[Path] = []
    for root in roots:
        if not root.is_dir():
            continue
        versioned = sorted(
            (folder for folder in root.iterdir() if folder.is_dir() and folder.name[:1].isdigit()),
            key=lambda folder: [int(part) if part.isdigit() else 0 for part in folder.name.split(".")],
            reverse=True,
        )
        for folder in [*versioned, root]:
            path = folder / "x64" / f"{SIGNTOOL}.exe"
            if path.is_file():
                candidates.append(path)
    return candidates


def find_signer(
    *,
    bin_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    sdk_roots: Sequence[Path] | None = None,
) -> Path:
    """Resolve the signer from ``bin_path``, ``SIGNTOOL_PATH``, PATH, then the Windows SDK."""

    env = os.environ if environ is None else environ
    if bin_path is not None:
        return _from_explicit(SIGNTOOL, bin_path, "bin path")

    configured = env.get(SIGNTOOL_PATH_KEY)
    if configured:
        return _from_explicit(SIGNTOOL, Path(configured), f"'{SIGNTOOL_PATH_KEY}' location")

    found = _on_path(SIGNTOOL, env)
    if found is not None:
        return found

    candidates = _sdk_candidates(WINDOWS_KITS_ROOTS if sdk_roots is None else sdk_roots)
    if candidates:
        return candidates[0]

    raise GenericError(
        f"The '{SIGNTOOL}' application could not be found. Install the Windows SDK, add the "
        f"folder containing '{SIGNTOOL}.exe' to PATH, set the '{SIGNTOOL_PATH_KEY}' environment "
        "variable, or pass the '--bin-path' option."
    )


def launch_failure(program: str | Path, exc: OSError) -> GenericError:
    """Actionable error for a tool that could not be started."""

    name = Path(str(program)).name
    return GenericError(
        f"The '{name}' application could not be started ({exc.strerror or exc}). "
        "Check that it is installed and available on PATH."
    )


__all__ = [
    "BINARY_FOLDER_NAME",
    "CARGO",
    "MSIEXEC",
    "SIGNTOOL",
    "SIGNTOOL_PATH_KEY",
    "WINDOWS_KITS_ROOTS",
    "WIX_COMPILER",
    "WIX_LINKER",
    "WIX_PATH_KEY",
    "find_signer",
    "find_wix_tool",
    "launch_failure",
]

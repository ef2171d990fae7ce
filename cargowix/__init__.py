"""Build Windows installers (msi/exe) for Rust packages with the WiX Toolset."""

__version__ = "0.3.0"

from .clean import CleanBuilder, CleanExecution, CleanResult
from .create import CreateBuilder, CreateExecution, CreateResult
from .errors import (
    CommandError,
    GenericError,
    ManifestError,
    MustacheError,
    TomlError,
    UuidError,
    VersionError,
    WixError,
    WixIoError,
    XPathError,
    XmlError,
    exit_code,
)
from .initialize import InitializeBuilder, InitializeExecution, InitializeResult
from .printer import LicenseBuilder, LicenseExecution, WxsBuilder, WxsExecution
from .purge import PurgeBuilder, PurgeExecution
from .sign import SignBuilder, SignExecution, SignResult
from .stored_path import StoredPath
from .templates import Template
from .wixobj import InstallerKind, WixObjKind

__all__ = [
    "CleanBuilder",
    "CleanExecution",
    "CleanResult",
    "CommandError",
    "CreateBuilder",
    "CreateExecution",
    "CreateResult",
    "GenericError",
    "InitializeBuilder",
    "InitializeExecution",
    "InitializeResult",
    "InstallerKind",
    "LicenseBuilder",
    "LicenseExecution",
    "ManifestError",
    "MustacheError",
    "PurgeBuilder",
    "PurgeExecution",
    "SignBuilder",
    "SignExecution",
    "SignResult",
    "StoredPath",
    "Template",
    "TomlError",
    "UuidError",
    "VersionError",
    "WixError",
    "WixIoError",
    "WixObjKind",
    "WxsBuilder",
    "WxsExecution",
    "XPathError",
    "XmlError",
    "__version__",
    "exit_code",
]

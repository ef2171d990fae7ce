"""Classifying compiled WiX object files."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterable
import xml.etree.ElementTree as ET

from .errors import GenericError, WixIoError, XPathError, XmlError


WIX_OBJECTS_NAMESPACE = "http://schemas.microsoft.com/wix/2006/objects"
_NAMESPACES = {"wix": WIX_OBJECTS_NAMESPACE}
_ROOT_TAG = f"{{{WIX_OBJECTS_NAMESPACE}}}wixObject"


class InstallerKind(str, Enum):
    MSI = "msi"
    EXE = "exe"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def from_objects(cls, kinds: Iterable["WixObjKind"]) -> "InstallerKind":
        """A single bundle among the objects makes the installer an executable."""

        if any(kind is WixObjKind.BUNDLE for kind in kinds):
            return cls.EXE
        return cls.MSI


class WixObjKind(str, Enum):
    BUNDLE = "bundle"
    FRAGMENT = "fragment"
    PRODUCT = "product"

    @classmethod
    def from_str(cls, value: str) -> "WixObjKind":
        normalized = value.strip().lower()
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise GenericError(f"Unknown WiX object section type '{value}'")

    @classmethod
    def from_xml(cls, text: str | bytes, *, source: str = "<wixobj>") -> "WixObjKind":
        try:
            root = ET.fromstring(text)
        except ET.ParseError as exc:
            raise XmlError(f"The '{source}' WiX object is not well-formed XML") from exc

        if root.tag != _ROOT_TAG:
            raise XPathError(
                f"The '{source}' WiX object does not have a 'wixObject' root element"
            )
        section = root.find("wix:section", _NAMESPACES)
        if section is None or section.get("type") is None:
            raise XPathError(
                f"The '{source}' WiX object does not contain a typed 'section' element"
            )
        return cls.from_str(section.get("type", ""))

    @classmethod
    def from_path(cls, path: Path) -> "WixObjKind":
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise WixIoError(f"Failed to read '{path}': {exc.strerror or exc}") from exc
        return cls.from_xml(data, source=str(path))


__all__ = ["InstallerKind", "WIX_OBJECTS_NAMESPACE", "WixObjKind"]

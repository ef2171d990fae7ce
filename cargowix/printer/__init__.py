"""Rendering the embedded templates to a file or to a string."""
from .license import LicenseBuilder, LicenseExecution
from .wxs import Binary, WxsBuilder, WxsExecution

__all__ = [
    "Binary",
    "LicenseBuilder",
    "LicenseExecution",
    "WxsBuilder",
    "WxsExecution",
]

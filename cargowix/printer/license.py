"""Rendering a license template (MIT, Apache-2.0, GPL-3.0) as rich text."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from wixcore.console import Console

from ..builder import Builder, resolve_path, write_text
from ..errors import GenericError
from ..manifest import load_package
from ..templates import Template


@dataclass(frozen=True)
class LicenseBuilder(Builder):
    """Options for ``print <license>``.

    The manifest is only read when the template or the copyright holder has
    to be taken from it.
    """

    template: Template | str | None = None
    copyright_holder: str | None = None
    copyright_year: str | None = None
    input: Path | None = None
    output: Path | None = None
    package: str | None = None
    config: Path | None = None

    def build(self, *, console: Console | None = None) -> "LicenseExecution":
        console = console or Console()
        base = Path.cwd()
        holder = self.copyright_holder
        template_id = self.template

        if template_id is None or holder is None:
            manifest = load_package(self.input, self.package, config=self.config)
            base = manifest.package_root
            if template_id is None:
                if manifest.license is None:
                    raise GenericError(
                        "No license template was given and the manifest does not set 'license'"
                    )
                template_id = manifest.license
            if holder is None:
                holder = manifest.manufacturer

        template = template_id if isinstance(template_id, Template) else Template.from_str(template_id)
        if not template.is_license:
            raise GenericError(f"The '{template}' template is not a license")

        return LicenseExecution(
            template=template,
            copyright_holder=holder,
            copyright_year=self.copyright_year or str(date.today().year),
            output=resolve_path(self.output, base),
            console=console,
        )


@dataclass(frozen=True)
class LicenseExecution:
    template: Template
    copyright_holder: str
    copyright_year: str
    output: Path | None = None
    console: Console = field(default_factory=Console, compare=False, repr=False)

    def context(self) -> dict:
        return {
            "copyright-holder": self.copyright_holder,
            "copyright-year": self.copyright_year,
        }

    def render(self) -> str:
        return self.template.render(self.context())

    def run(self) -> str:
        """Render the license, writing it to ``output`` when one was resolved."""

        text = self.render()
        if self.output is not None:
            write_text(self.output, text, self.console)
        return text


__all__ = ["LicenseBuilder", "LicenseExecution"]

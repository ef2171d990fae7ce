"""Registry of the embedded installer-source and license templates."""
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from importlib import resources
from typing import Any, List, Mapping

from wixcore.template import MustacheTemplate, TemplateError

from ..errors import GenericError, MustacheError


class Template(str, Enum):
    """The fixed catalog of templates that can be rendered."""

    APACHE2 = "Apache-2.0"
    GPL3 = "GPL-3.0"
    MIT = "MIT"
    WXS = "WXS"

    @property
    def id(self) -> str:
        return self.value

    @property
    def resource_name(self) -> str:
        if self is Template.WXS:
            return "main.wxs.mustache"
        return f"{self.value}.rtf.mustache"

    @property
    def is_license(self) -> bool:
        return self is not Template.WXS

    @classmethod
    def possible_values(cls) -> List[str]:
        """Every accepted spelling: each id as written and in lowercase."""

        values: List[str] = []
        for template in cls:
            values.append(template.value)
            values.append(template.value.lower())
        return values

    @classmethod
    def license_ids(cls) -> List[str]:
        return [template.value for template in cls if template.is_license]

    @classmethod
    def from_str(cls, value: str) -> "Template":
        normalized = value.strip().lower()
        for template in cls:
            if template.value.lower() == normalized:
                return template
        raise GenericError(
            f"Unknown template '{value}'. Possible values: {', '.join(cls.possible_values())}"
        )

    @classmethod
    def find_license(cls, value: str | None) -> "Template | None":
        """Registry license matching a manifest license id, if any."""

        if not value:
            return None
        normalized = value.strip().lower()
        for template in cls:
            if template.is_license and template.value.lower() == normalized:
                return template
        return None

    def source(self) -> str:
        return _load_source(self.resource_name)

    def render(self, context: Mapping[str, Any]) -> str:
        try:
            return _compile(self.resource_name).render(context)
        except TemplateError as exc:
            raise MustacheError(f"Failed to render the '{self.value}' template: {exc}") from exc

    def __str__(self) -> str:
        return self.value


@lru_cache(maxsize=None)
def _load_source(name: str) -> str:
    return resources.files(__name__).joinpath(name).read_text(encoding="utf-8")


@lru_cache(maxsize=None)
def _compile(name: str) -> MustacheTemplate:
    try:
        return MustacheTemplate(_load_source(name))
    except TemplateError as exc:
        raise MustacheError(f"The embedded '{name}' template is invalid: {exc}") from exc


__all__ = ["Template"]

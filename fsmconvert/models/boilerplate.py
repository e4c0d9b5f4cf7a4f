"""Boilerplate: backend-specific text fragments for machines and states."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

BoilerplateCode = str


class SectionName(str, Enum):
    """Boilerplate sections of C-derived languages."""

    INCLUDE_PATH = "includePath"
    INCLUDES = "includes"
    VARIABLES = "variables"
    FUNCTIONS = "functions"
    ON_ENTRY = "onEntry"
    ON_EXIT = "onExit"
    INTERNAL = "internal"
    ON_SUSPEND = "onSuspend"
    ON_RESUME = "onResume"


def _empty_sections() -> dict[SectionName, BoilerplateCode]:
    return {section: "" for section in SectionName}


@dataclass
class CBoilerplate:
    """
    Boilerplate for C-based machines.

    Every section is present; sections that were not supplied are empty.
    """

    sections: dict[SectionName, BoilerplateCode] = field(default_factory=_empty_sections)

    def __getitem__(self, section: SectionName) -> BoilerplateCode:
        return self.sections.get(SectionName(section), "")

    def __setitem__(self, section: SectionName, code: BoilerplateCode) -> None:
        self.sections[SectionName(section)] = code

    @property
    def is_empty(self) -> bool:
        return not any(code.strip() for code in self.sections.values())

    def to_dict(self) -> dict[str, str]:
        return {section.value: code for section, code in self.sections.items()}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> CBoilerplate:
        boilerplate = cls()
        for key, code in data.items():
            boilerplate[SectionName(key)] = code
        return boilerplate


# Any boilerplate handled by this package is section-based
Boilerplate = CBoilerplate

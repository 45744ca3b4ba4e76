"""Design Automation engine identifiers.

WHY: Engines are referenced by qualified ids such as
"Autodesk.AutoCAD+24_1" or "Autodesk.3dsMax+2024". Only the name
segment decides how an activity command line has to be written, so it
is parsed once into a closed enum.

HOW: EngineId.parse() splits "<owner>.<name>+<alias>" into its parts.
EngineKind.from_name() maps the name onto one of the supported engines.

RULES:
- Owner is everything before the first ".", alias everything after the
  last "+"; the alias is optional
- Unknown engine names raise ActivityValidationError, never a default
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from forge_client.errors import ActivityValidationError


class EngineKind(str, enum.Enum):
    """The engines an activity can be built for.

    Values are the engine names exactly as they appear in engine ids.
    """

    AUTOCAD = "AutoCAD"
    THREEDSMAX = "3dsMax"
    REVIT = "Revit"
    INVENTOR = "Inventor"

    @classmethod
    def from_name(cls, name: str) -> EngineKind:
        for kind in cls:
            if kind.value == name:
                return kind
        supported = ", ".join(kind.value for kind in cls)
        raise ActivityValidationError(
            f"Unsupported engine '{name}'. Supported engines: {supported}."
        )


@dataclass(frozen=True)
class EngineId:
    """A parsed "<owner>.<name>+<alias>" engine identifier."""

    owner: str
    name: str
    alias: str | None = None

    @classmethod
    def parse(cls, engine: str) -> EngineId:
        owner, dot, rest = engine.partition(".")
        name, plus, alias = rest.rpartition("+")
        if not plus:
            name, alias = rest, ""
        if not dot or not owner or not name or (plus and not alias):
            raise ActivityValidationError(
                f"Malformed engine id '{engine}'; expected '<owner>.<name>+<version>'."
            )
        return cls(owner=owner, name=name, alias=alias or None)

    @property
    def kind(self) -> EngineKind:
        return EngineKind.from_name(self.name)

    def __str__(self) -> str:
        if self.alias is None:
            return f"{self.owner}.{self.name}"
        return f"{self.owner}.{self.name}+{self.alias}"

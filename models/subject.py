"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from enum import Enum

from pydantic import BaseModel, Field


class EducationLevel(str, Enum):
    O_LEVEL = "O_LEVEL"
    A_LEVEL = "A_LEVEL"
    BOTH = "BOTH"


class SubjectType(str, Enum):
    CORE = "CORE"
    OPTIONAL = "OPTIONAL"


class Subject(BaseModel):
    """Repräsentiert ein Unterrichtsfach aus dem Fächerkatalog."""

    id: str
    name: str
    code: str                               # "PHY", "GS"
    type: SubjectType = SubjectType.CORE
    education_level: EducationLevel = EducationLevel.BOTH
    is_compulsory: bool = False             # Pflichtfach für alle Schüler der Stufe
    pass_mark: int = Field(40, ge=0, le=100)

    def offered_at(self, level: EducationLevel) -> bool:
        """True wenn das Fach auf der Stufe ``level`` angeboten wird."""
        return self.education_level in (level, EducationLevel.BOTH)

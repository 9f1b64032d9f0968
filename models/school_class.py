"""Datenmodell für eine Schulklasse (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from models.reference import OptionalRefId, RefId, RefIdList
from models.subject import EducationLevel


class SubjectAssignment(BaseModel):
    """Ein Fach in einer Klasse mit (optional) zugewiesener Lehrkraft."""

    subject: RefId
    teacher: OptionalRefId = None    # None = Fach vorhanden, aber unbesetzt

    @property
    def is_assigned(self) -> bool:
        return self.teacher is not None


class SchoolClass(BaseModel):
    """Repräsentiert eine Klasse (z.B. "Form 5 A", "Form 2 B").

    Zwei Kombinationsfelder existieren parallel: das alte Einzelfeld
    ``subject_combination`` und die Liste ``subject_combinations``.
    Ausgewertet wird immer die Vereinigung beider (siehe ``combination_ids``).
    """

    id: str
    name: str
    education_level: EducationLevel
    form: Optional[int] = None            # 1..6
    stream: Optional[str] = None          # "A", "B", ...
    subjects: list[SubjectAssignment] = []
    subject_combination: OptionalRefId = None
    subject_combinations: RefIdList = []
    version: int = 0                      # Optimistische Sperre für Zuweisungen

    @field_validator("education_level")
    @classmethod
    def _check_level(cls, v: EducationLevel) -> EducationLevel:
        if v == EducationLevel.BOTH:
            raise ValueError("Eine Klasse ist entweder O_LEVEL oder A_LEVEL.")
        return v

    @model_validator(mode="after")
    def _check_unique_subjects(self):
        seen: set[str] = set()
        for row in self.subjects:
            if row.subject in seen:
                raise ValueError(
                    f"Klasse {self.id}: Fach {row.subject} ist mehrfach zugeordnet."
                )
            seen.add(row.subject)
        return self

    @property
    def is_a_level(self) -> bool:
        return self.education_level == EducationLevel.A_LEVEL

    @property
    def combination_ids(self) -> list[str]:
        """Altes Einzelfeld + neue Liste, ohne Duplikate."""
        ids = list(self.subject_combinations)
        if self.subject_combination and self.subject_combination not in ids:
            ids.insert(0, self.subject_combination)
        return ids

    @property
    def subject_ids(self) -> list[str]:
        return [row.subject for row in self.subjects]

    def assignment_map(self) -> dict[str, Optional[str]]:
        """Fach-ID → Lehrer-ID (oder None)."""
        return {row.subject: row.teacher for row in self.subjects}

    def with_assignments(self, assignments: dict[str, Optional[str]]) -> "SchoolClass":
        """Kopie der Klasse mit den übergebenen Zuweisungen als Fach-Zeilen."""
        rows = [
            SubjectAssignment(subject=subject_id, teacher=teacher_id)
            for subject_id, teacher_id in assignments.items()
        ]
        return self.model_copy(update={"subjects": rows})

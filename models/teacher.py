"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import BaseModel

from models.reference import RefIdList


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft.

    ``subjects`` sind die Fächer, für die die Lehrkraft qualifiziert ist.
    Das ist NICHT dasselbe wie die Zuweisung in einer konkreten Klasse und
    wird durch Zuweisungen nie verändert.
    """

    id: str
    name: str                      # "Mwakyusa, Neema"
    subjects: RefIdList = []       # Qualifizierte Fächer (IDs)
    is_admin: bool = False

    def is_qualified_for(self, subject_id: str) -> bool:
        return subject_id in self.subjects

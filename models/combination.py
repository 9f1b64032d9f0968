"""Datenmodell für eine A-Level-Fächerkombination (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel

from models.reference import RefIdList
from models.subject import EducationLevel


class SubjectCombination(BaseModel):
    """Benanntes Bündel aus Hauptfächern und kombinationsspezifischen Pflichtfächern.

    Beispiel PCM: Physik, Chemie, Mathematik + General Studies.
    Die Pflichtfächer dürfen sich mit den global verpflichtenden Fächern
    überschneiden; dedupliziert wird erst beim Auflösen der Klasse.
    """

    id: str
    name: str
    code: str                                    # "PCM"
    education_level: EducationLevel = EducationLevel.A_LEVEL
    subjects: RefIdList = []                     # Hauptfächer (principal)
    compulsory_subjects: RefIdList = []          # Subsidiary/Pflicht
    is_active: bool = True
    description: Optional[str] = None

    @property
    def all_subject_ids(self) -> list[str]:
        """Haupt- und Pflichtfächer ohne Duplikate."""
        return list(dict.fromkeys(self.subjects + self.compulsory_subjects))

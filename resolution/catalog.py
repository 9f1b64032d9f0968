"""Lesender Zugriff auf den Fächerkatalog."""

from typing import Iterable

from models.subject import EducationLevel, Subject
from resolution.repositories import SubjectRepository


class SubjectCatalog:
    """Schlägt Fächer per ID oder als Pflichtfächer einer Stufe nach.

    Unbekannte IDs werden stillschweigend ausgelassen.
    """

    def __init__(self, repository: SubjectRepository) -> None:
        self._repository = repository

    def get_by_ids(self, ids: Iterable[str]) -> dict[str, Subject]:
        """Fach-ID → Fach, nur für IDs, die im Katalog existieren.

        Die Reihenfolge folgt ``ids``.
        """
        ids = [i for i in dict.fromkeys(ids) if i]
        if not ids:
            return {}
        found = {s.id: s for s in self._repository.find_by_ids(ids)}
        return {i: found[i] for i in ids if i in found}

    def get_compulsory(self, education_level: EducationLevel) -> dict[str, Subject]:
        """Alle Pflichtfächer der Stufe (einschließlich Stufe BOTH)."""
        return {
            s.id: s
            for s in self._repository.find_compulsory(education_level)
            if s.is_compulsory and s.offered_at(education_level)
        }

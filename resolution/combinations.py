"""Auflösung von Fächerkombinationen in vollständige Fach-Datensätze."""

import logging
from typing import Optional

from pydantic import BaseModel

from models.combination import SubjectCombination
from models.subject import Subject
from resolution.catalog import SubjectCatalog
from resolution.repositories import CombinationRepository

logger = logging.getLogger(__name__)


class ResolvedCombination(BaseModel):
    """Kombination mit dereferenzierten Haupt- und Pflichtfächern."""

    combination: SubjectCombination
    principal_subjects: list[Subject]
    compulsory_subjects: list[Subject]


class CombinationResolver:
    """Löst eine Kombinations-ID über den Fächerkatalog auf."""

    def __init__(self, repository: CombinationRepository, catalog: SubjectCatalog) -> None:
        self._repository = repository
        self._catalog = catalog

    def resolve(self, combination_id: str) -> Optional[ResolvedCombination]:
        """Gibt None zurück, wenn die Kombination selbst nicht existiert.

        Einzelne veraltete Fach-Referenzen in der Kombination werden
        verworfen, der Rest wird trotzdem aufgelöst.
        """
        combination = self._repository.find_by_id(combination_id)
        if combination is None:
            return None

        lookup = self._catalog.get_by_ids(combination.all_subject_ids)
        stale = [i for i in combination.all_subject_ids if i not in lookup]
        if stale:
            logger.warning(
                f"Kombination {combination.code}: veraltete Fach-Referenzen {stale} ignoriert"
            )

        return ResolvedCombination(
            combination=combination,
            principal_subjects=[lookup[i] for i in combination.subjects if i in lookup],
            compulsory_subjects=[
                lookup[i] for i in combination.compulsory_subjects if i in lookup
            ],
        )

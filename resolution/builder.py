"""Effektives Fächerangebot einer Klasse.

Das Fächerangebot ist kein gespeichertes Feld, sondern die Vereinigung aus
vier Quellen (nach Fach-ID dedupliziert):

  1. direkt der Klasse zugeordnete Fächer
  2. Hauptfächer der Kombination(en)      – nur A-Level
  3. global verpflichtende Fächer der Stufe
  4. Pflichtfächer der Kombination(en)    – nur A-Level

O-Level-Klassen ignorieren Kombinationsfelder vollständig, auch wenn sie
befüllt sind.
"""

import logging
from typing import Iterable

from models.school_class import SchoolClass
from models.subject import Subject
from resolution.catalog import SubjectCatalog
from resolution.combinations import CombinationResolver, ResolvedCombination

logger = logging.getLogger(__name__)


class EffectiveSubjectBuilder:
    """Berechnet das effektive Fächerangebot einer Klasse (deterministisch)."""

    def __init__(self, catalog: SubjectCatalog, resolver: CombinationResolver) -> None:
        self._catalog = catalog
        self._resolver = resolver

    def build(self, school_class: SchoolClass) -> list[Subject]:
        """Gibt jedes Fach genau einmal zurück, in Reihenfolge des ersten Auftretens."""
        collected: dict[str, Subject] = {}

        direct = self._catalog.get_by_ids(school_class.subject_ids)
        stale = [i for i in school_class.subject_ids if i not in direct]
        if stale:
            logger.warning(
                f"Klasse {school_class.id}: veraltete Fach-Referenzen {stale} ignoriert"
            )
        _merge(collected, direct.values())

        combinations = self._resolve_combinations(school_class)
        for resolved in combinations:
            _merge(collected, resolved.principal_subjects)

        _merge(collected, self._catalog.get_compulsory(school_class.education_level).values())

        for resolved in combinations:
            _merge(collected, resolved.compulsory_subjects)

        return list(collected.values())

    def build_ids(self, school_class: SchoolClass) -> set[str]:
        return {s.id for s in self.build(school_class)}

    def _resolve_combinations(self, school_class: SchoolClass) -> list[ResolvedCombination]:
        if not school_class.is_a_level:
            return []
        resolved: list[ResolvedCombination] = []
        for combination_id in school_class.combination_ids:
            result = self._resolver.resolve(combination_id)
            if result is None:
                logger.warning(
                    f"Klasse {school_class.id}: Kombination {combination_id} existiert nicht"
                )
                continue
            resolved.append(result)
        return resolved


def _merge(collected: dict[str, Subject], subjects: Iterable[Subject]) -> None:
    """Fügt Fächer nach ID ein.

    Ein bereits gesammeltes Fach wird nur durch einen vollständigeren
    Datensatz desselben Fachs ersetzt; die Position bleibt erhalten.
    """
    for subject in subjects:
        existing = collected.get(subject.id)
        if existing is None or len(subject.model_fields_set) > len(existing.model_fields_set):
            collected[subject.id] = subject

"""Filter: welche Fächer einer Klasse darf eine Lehrkraft selbst unterrichten."""

from typing import Iterable

from models.subject import Subject


def filter_for_teacher(
    effective_subjects: Iterable[Subject], qualified_subject_ids: Iterable[str]
) -> list[Subject]:
    """Schnittmenge nach Fach-ID; Reihenfolge von ``effective_subjects``.

    Rein lesend – Qualifikationen werden hier nie verändert.
    """
    qualified = set(qualified_subject_ids)
    return [s for s in effective_subjects if s.id in qualified]

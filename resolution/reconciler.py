"""Zusammenführen von Teil-Updates der Lehrerzuweisungen einer Klasse.

Ein Update nennt nur die Fächer, die sich ändern sollen. Alle anderen
Zuweisungen bleiben unverändert erhalten – ein Ersetzen der ganzen
Fächerliste hat früher die Lehrkräfte der Nachbarfächer gelöscht.

Zustände pro Fach:  Unassigned (None)  ⇄  Assigned (Lehrer-ID)
``None`` im Update bedeutet "Lehrkraft entfernen", nicht "Fach entfernen".
"""

from typing import Iterable, Optional

from resolution.errors import InvalidAssignmentError

AssignmentMap = dict[str, Optional[str]]


def reconcile(
    current: AssignmentMap,
    proposed: AssignmentMap,
    allowed_subject_ids: Optional[Iterable[str]] = None,
    class_id: str = "?",
) -> AssignmentMap:
    """Gibt die neue, vollständige Zuweisungstabelle zurück.

    Args:
        current: Aktuelle Zuweisungen der Klasse (Fach → Lehrer/None).
        proposed: Zu ändernde Fächer (Fach → Lehrer/None).
        allowed_subject_ids: Effektives Fächerangebot der Klasse. Wenn
            angegeben, werden Updates für andere Fächer abgelehnt.
        class_id: Nur für Fehlermeldungen.

    Raises:
        InvalidAssignmentError: Update für ein Fach außerhalb des Angebots.
    """
    if allowed_subject_ids is not None:
        allowed = set(allowed_subject_ids)
        invalid = [s for s in proposed if s not in allowed]
        if invalid:
            raise InvalidAssignmentError(class_id, invalid)

    result: AssignmentMap = dict(current)
    for subject_id, teacher_id in proposed.items():
        result[subject_id] = teacher_id or None
    return result

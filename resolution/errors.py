"""Fehlerklassen der Fächerauflösung.

Veraltete Referenzen (IDs innerhalb einer Klasse oder Kombination, die im
Katalog nicht mehr existieren) sind KEIN Fehler und tauchen hier nicht auf.
"""

from typing import Iterable, Optional


class ResolutionError(Exception):
    """Basisklasse aller Fehler der Fächerauflösung."""


class NotFoundError(ResolutionError):
    """Eine direkt angefragte Klasse, Lehrkraft oder Kombination existiert nicht."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} nicht gefunden: {entity_id}")


class InvalidAssignmentError(ResolutionError):
    """Zuweisung für Fächer, die die Klasse gar nicht hat (oder nicht haben darf)."""

    def __init__(self, class_id: str, subject_ids: Iterable[str],
                 reason: str = "nicht im Fächerangebot der Klasse") -> None:
        self.class_id = class_id
        self.subject_ids = sorted(subject_ids)
        self.reason = reason
        super().__init__(
            f"Klasse {class_id}: Fächer {', '.join(self.subject_ids)} {reason}."
        )


class ConcurrentModificationError(ResolutionError):
    """Zuweisungen einer Klasse wurden zwischen Lesen und Schreiben verändert."""

    def __init__(self, class_id: str, expected: Optional[int] = None,
                 actual: Optional[int] = None) -> None:
        self.class_id = class_id
        self.expected = expected
        self.actual = actual
        if expected is None:
            msg = f"Klasse {class_id}: Zuweisungen werden gerade bearbeitet."
        else:
            msg = (f"Klasse {class_id}: Version {actual} statt erwarteter "
                   f"Version {expected} – bitte neu laden.")
        super().__init__(msg)

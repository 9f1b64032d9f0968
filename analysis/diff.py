"""Vergleich zweier Zuweisungstabellen einer Klasse (Diff / Changelog).

Gibt strukturierte Unterschiede zurück, die als Rich-Tabelle oder JSON
ausgegeben werden können.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Literal, Optional

ChangeKind = Literal["added", "assigned", "reassigned", "cleared", "removed"]


@dataclass
class AssignmentChange:
    """Eine veränderte Zuweisung für ein Fach."""

    subject_id: str
    kind: ChangeKind
    old_teacher: Optional[str] = None
    new_teacher: Optional[str] = None


@dataclass
class AssignmentDiff:
    """Vollständiger Diff zwischen zwei Zuweisungstabellen."""

    changes: list[AssignmentChange] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Gibt True zurück wenn kein Unterschied gefunden wurde."""
        return not self.changes

    def of_kind(self, kind: ChangeKind) -> list[AssignmentChange]:
        return [c for c in self.changes if c.kind == kind]

    def summary(self) -> str:
        """Einzeilige Zusammenfassung, z.B. für Log-Ausgaben."""
        if self.is_empty():
            return "keine Änderungen"
        labels = {
            "added": "neu", "assigned": "besetzt", "reassigned": "umbesetzt",
            "cleared": "freigegeben", "removed": "entfernt",
        }
        parts = []
        for kind, label in labels.items():
            n = len(self.of_kind(kind))  # type: ignore[arg-type]
            if n:
                parts.append(f"{n} {label}")
        return ", ".join(parts)

    def to_dict(self) -> dict:
        """Serialisiert den Diff als Dictionary (für JSON-Ausgabe)."""
        return {
            "changes": [
                {
                    "subject_id": c.subject_id,
                    "kind": c.kind,
                    "old_teacher": c.old_teacher,
                    "new_teacher": c.new_teacher,
                }
                for c in self.changes
            ],
        }

    def to_json(self, indent: int = 2) -> str:
        """Gibt den Diff als JSON-String zurück."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def diff_assignments(
    before: dict[str, Optional[str]], after: dict[str, Optional[str]]
) -> AssignmentDiff:
    """Vergleicht zwei Zuweisungstabellen (Fach → Lehrer/None).

    Klassifiziert jedes geänderte Fach:
    - added:      Fach neu, unbesetzt
    - assigned:   Fach neu besetzt (vorher unbesetzt oder nicht vorhanden)
    - reassigned: andere Lehrkraft
    - cleared:    Lehrkraft entfernt, Fach bleibt
    - removed:    Fach nicht mehr vorhanden

    Args:
        before: Basis / alt.
        after: Neu.

    Returns:
        AssignmentDiff, sortiert nach Fach-ID.
    """
    diff = AssignmentDiff()

    for subject_id in sorted(set(before) | set(after)):
        old = before.get(subject_id)
        new = after.get(subject_id)
        if subject_id not in after:
            diff.changes.append(AssignmentChange(subject_id, "removed", old, None))
        elif subject_id not in before:
            kind = "assigned" if new is not None else "added"
            diff.changes.append(AssignmentChange(subject_id, kind, None, new))
        elif old == new:
            continue
        elif old is None:
            diff.changes.append(AssignmentChange(subject_id, "assigned", None, new))
        elif new is None:
            diff.changes.append(AssignmentChange(subject_id, "cleared", old, None))
        else:
            diff.changes.append(AssignmentChange(subject_id, "reassigned", old, new))

    return diff

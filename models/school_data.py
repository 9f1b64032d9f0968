"""SchoolData: Vollständiger Datensatz für die Fächerzuordnung (Pydantic v2)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from models.subject import Subject
from models.combination import SubjectCombination
from models.teacher import Teacher
from models.school_class import SchoolClass


class SchoolData(BaseModel):
    """Vollständiger Datensatz: Fächer, Kombinationen, Klassen, Lehrkräfte."""

    subjects: list[Subject]
    combinations: list[SubjectCombination] = []
    classes: list[SchoolClass]
    teachers: list[Teacher]
    school_name: str = "Demo Secondary School"
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Lookups ───

    def subject(self, subject_id: str) -> Optional[Subject]:
        return next((s for s in self.subjects if s.id == subject_id), None)

    def combination(self, combination_id: str) -> Optional[SubjectCombination]:
        return next((c for c in self.combinations if c.id == combination_id), None)

    def school_class(self, class_id: str) -> Optional[SchoolClass]:
        return next((c for c in self.classes if c.id == class_id), None)

    def teacher(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    # ─── Übersicht ───

    def summary(self) -> str:
        rows = [r for c in self.classes for r in c.subjects]
        open_rows = sum(1 for r in rows if not r.is_assigned)
        a_level = sum(1 for c in self.classes if c.is_a_level)
        facts = {
            "Schule": self.school_name,
            "Klassen": f"{len(self.classes)} ({len(self.classes) - a_level} O-Level, {a_level} A-Level)",
            "Fächer": f"{len(self.subjects)} "
                      f"({sum(1 for s in self.subjects if s.is_compulsory)} Pflichtfächer)",
            "Kombinationen": str(len(self.combinations)),
            "Lehrkräfte": str(len(self.teachers)),
            "Fach-Zuordnungen": f"{len(rows)} ({len(rows) - open_rows} besetzt, {open_rows} offen)",
        }
        return "\n".join(f"{label}: {value}" for label, value in facts.items())

    # ─── Persistenz ───

    def save_json(self, path: Path) -> None:
        """Schreibt den Datensatz als JSON; setzt ``created_at``/``modified_at``."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc)
        stamped = self.model_copy(
            update={"created_at": self.created_at or stamp, "modified_at": stamp}
        )
        target.write_text(stamped.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load_json(cls, path: Path) -> "SchoolData":
        source = Path(path)
        if not source.is_file():
            raise FileNotFoundError(f"Datensatz nicht gefunden: {source}")
        return cls.model_validate_json(source.read_text(encoding="utf-8"))

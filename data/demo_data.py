"""Demo-Daten-Generator für die Fächerzuordnung.

Erzeugt einen reproduzierbaren Datensatz einer Sekundarschule:

  - Fächerkatalog und Standard-Kombinationen aus ``config.defaults``
  - Form 1–4 (O-Level) und Form 5–6 (A-Level) mit je ``streams_per_form`` Streams
  - A-Level-Klassen mit ein oder zwei Kombinationen, teils im alten Einzelfeld
  - Lehrkräfte mit ein bis zwei Qualifikationen, eine Schulleitung (Admin)
  - teilweise besetzte Fächer

Absichtliche Altlast: Form 1 A führt noch das gestrichene Fach "agric"
(veraltete Referenz, wird beim Auflösen ignoriert).
"""

import random
import string
from typing import Optional

from config.schema import AppConfig
from config.defaults import (
    A_LEVEL_FORMS,
    COMBINATIONS,
    O_LEVEL_CLASS_SUBJECTS,
    O_LEVEL_FORMS,
    SUBJECT_CATALOGUE,
)
from models.combination import SubjectCombination
from models.school_class import SchoolClass, SubjectAssignment
from models.school_data import SchoolData
from models.subject import EducationLevel, Subject
from models.teacher import Teacher

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Amani", "Baraka", "Neema", "Upendo", "Juma", "Rehema", "Daudi", "Zawadi",
    "Emmanuel", "Grace", "Hassani", "Imani", "Joseph", "Mwanaisha", "Peter",
    "Rose", "Salma", "Tumaini", "Faraji", "Halima", "Elia", "Agnes",
]

_LAST_NAMES = [
    "Mwakyusa", "Kimaro", "Massawe", "Mushi", "Lyimo", "Mrema", "Shirima",
    "Komba", "Njau", "Temba", "Mollel", "Laizer", "Mbwambo", "Kisanga",
    "Mfinanga", "Swai", "Urio", "Minja", "Kessy", "Mtui", "Nyirenda",
    "Chuwa", "Makundi", "Sanga", "Kahama", "Msuya", "Ngowi", "Rwegasira",
]

_RETIRED_SUBJECT = "agric"


def _make_abbreviation(last_name: str, used: set[str]) -> str:
    """Generiert ein eindeutiges 3-Zeichen-Kürzel aus dem Nachnamen."""
    base = last_name.upper()
    candidates = [
        base[:3],
        base[:2] + base[-1],
        base[0] + base[2:4],
        base[:2] + str(len(used) % 10),
    ]
    for c in candidates:
        c = c[:3].ljust(3, "X")
        if c not in used:
            used.add(c)
            return c
    # Fallback: fortlaufend
    n = len(used)
    while True:
        c = f"T{n:02d}"
        if c not in used:
            used.add(c)
            return c
        n += 1


class DemoDataGenerator:
    """Generiert einen vollständigen Demo-Datensatz auf Basis der AppConfig."""

    def __init__(self, config: AppConfig, seed: Optional[int] = None) -> None:
        self.config = config
        self.rng = random.Random(config.demo.seed if seed is None else seed)
        self._used_abbreviations: set[str] = set()

    # ─── Fächer & Kombinationen ───────────────────────────────────────────────

    def _generate_subjects(self) -> list[Subject]:
        return [
            Subject(
                id=subject_id,
                name=meta["name"],
                code=meta["code"],
                type=meta["type"],
                education_level=meta["level"],
                is_compulsory=meta["compulsory"],
            )
            for subject_id, meta in SUBJECT_CATALOGUE.items()
        ]

    def _generate_combinations(self) -> list[SubjectCombination]:
        return [
            SubjectCombination(
                id=code.lower(),
                name=name,
                code=code,
                subjects=principal,
                compulsory_subjects=compulsory,
            )
            for code, (name, principal, compulsory) in COMBINATIONS.items()
        ]

    # ─── Lehrkräfte ───────────────────────────────────────────────────────────

    def _make_teacher(self, subjects: list[str], is_admin: bool = False) -> Teacher:
        first = self.rng.choice(_FIRST_NAMES)
        last = self.rng.choice(_LAST_NAMES)
        abbr = _make_abbreviation(last, self._used_abbreviations)
        return Teacher(id=abbr, name=f"{last}, {first}", subjects=subjects,
                       is_admin=is_admin)

    def _generate_teachers(self) -> list[Teacher]:
        """Pro Fach ``teachers_per_subject`` Lehrkräfte, teils mit Zweitfach."""
        teachers = [self._make_teacher(subjects=[], is_admin=True)]
        subject_ids = list(SUBJECT_CATALOGUE)
        for subject_id in subject_ids:
            for _ in range(self.config.demo.teachers_per_subject):
                subjects = [subject_id]
                if self.rng.random() < 0.6:
                    second = self.rng.choice([s for s in subject_ids if s != subject_id])
                    subjects.append(second)
                teachers.append(self._make_teacher(subjects))
        return teachers

    # ─── Klassen ──────────────────────────────────────────────────────────────

    def _generate_classes(self) -> list[SchoolClass]:
        streams = list(string.ascii_uppercase[:self.config.demo.streams_per_form])
        combination_ids = [code.lower() for code in COMBINATIONS]
        classes: list[SchoolClass] = []

        for form in O_LEVEL_FORMS:
            for i, stream in enumerate(streams):
                subjects = list(O_LEVEL_CLASS_SUBJECTS)
                subjects.append("comm" if i % 2 == 0 else "bk")
                if form == 1 and i == 0:
                    subjects.append(_RETIRED_SUBJECT)
                classes.append(SchoolClass(
                    id=f"f{form}{stream.lower()}",
                    name=f"Form {form} {stream}",
                    education_level=EducationLevel.O_LEVEL,
                    form=form,
                    stream=stream,
                    subjects=[SubjectAssignment(subject=s) for s in subjects],
                ))

        offset = 0
        for form in A_LEVEL_FORMS:
            for i, stream in enumerate(streams):
                primary = combination_ids[offset % len(combination_ids)]
                offset += 1
                principal = COMBINATIONS[primary.upper()][1]
                if i % 2 == 0:
                    # Altes Datenmodell: eine Kombination im Einzelfeld
                    extra = {"subject_combination": primary}
                else:
                    secondary = combination_ids[offset % len(combination_ids)]
                    extra = {"subject_combinations": [primary, secondary]}
                classes.append(SchoolClass(
                    id=f"f{form}{stream.lower()}",
                    name=f"Form {form} {stream}",
                    education_level=EducationLevel.A_LEVEL,
                    form=form,
                    stream=stream,
                    subjects=[SubjectAssignment(subject=s) for s in principal],
                    **extra,
                ))
        return classes

    def _assign_teachers(self, classes: list[SchoolClass],
                         teachers: list[Teacher]) -> list[SchoolClass]:
        """Besetzt einen Teil der Fach-Zeilen mit qualifizierten Lehrkräften."""
        ratio = self.config.demo.assignment_ratio
        result = []
        for cls in classes:
            assignments = cls.assignment_map()
            for subject_id in assignments:
                qualified = [t for t in teachers if t.is_qualified_for(subject_id)]
                if qualified and self.rng.random() < ratio:
                    assignments[subject_id] = self.rng.choice(qualified).id
            result.append(cls.with_assignments(assignments))
        return result

    # ─── Vollständiger Datensatz ──────────────────────────────────────────────

    def generate(self) -> SchoolData:
        """Erzeugt den vollständigen Datensatz als SchoolData-Objekt."""
        teachers = self._generate_teachers()
        classes = self._assign_teachers(self._generate_classes(), teachers)
        return SchoolData(
            subjects=self._generate_subjects(),
            combinations=self._generate_combinations(),
            classes=classes,
            teachers=teachers,
            school_name=self.config.school_name,
        )

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: SchoolData) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demo-Daten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        a_level = sum(1 for c in data.classes if c.is_a_level)
        table.add_row("Fächer", str(len(data.subjects)),
                      f"{sum(1 for s in data.subjects if s.is_compulsory)} Pflichtfächer")
        table.add_row("Kombinationen", str(len(data.combinations)),
                      ", ".join(c.code for c in data.combinations))
        table.add_row("Klassen", str(len(data.classes)),
                      f"{len(data.classes) - a_level} O-Level, {a_level} A-Level")
        table.add_row("Lehrkräfte", str(len(data.teachers)),
                      f"{sum(1 for t in data.teachers if t.is_admin)} Admin")

        console.print(table)

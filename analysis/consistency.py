"""Konsistenz-Check eines Datensatzes.

Findet Referenzen, die beim Auflösen stillschweigend übergangen werden,
damit sie in der Verwaltung sichtbar und bereinigt werden können.
"""

from typing import Literal

from pydantic import BaseModel

from models.school_data import SchoolData


class ValidationViolation(BaseModel):
    """Ein einzelnes Konsistenzproblem."""

    severity: Literal["error", "warning"]
    check: str           # z.B. "stale_subject_reference"
    description: str
    entity: str          # class_id / combination_id / teacher_id


class ValidationReport(BaseModel):
    """Ergebnis des Konsistenz-Checks."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    @property
    def errors(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ KONSISTENT[/bold green]"
            if self.is_valid
            else "[bold red]✗ FEHLER GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(self.errors)} | Warnungen: {len(self.warnings)}"]
        console.print(Panel("\n".join(lines), title="Konsistenz-Check", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Probleme gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Prüfung", width=30)
        table.add_column("Entität", width=14)
        table.add_column("Beschreibung")
        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.check,
                v.entity,
                v.description,
            )
        console.print(table)


class ConsistencyChecker:
    """Prüft einen SchoolData-Datensatz auf verwaiste und widersprüchliche Referenzen."""

    def check(self, data: SchoolData) -> ValidationReport:
        violations: list[ValidationViolation] = []

        violations.extend(self._check_class_subjects(data))
        violations.extend(self._check_combination_subjects(data))
        violations.extend(self._check_class_combinations(data))
        violations.extend(self._check_teacher_references(data))
        violations.extend(self._check_qualifications(data))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_class_subjects(self, data: SchoolData) -> list[ValidationViolation]:
        """Fach-Zeilen einer Klasse, deren Fach nicht mehr im Katalog ist."""
        known = {s.id for s in data.subjects}
        violations: list[ValidationViolation] = []
        for cls in data.classes:
            for subject_id in cls.subject_ids:
                if subject_id not in known:
                    violations.append(ValidationViolation(
                        severity="warning",
                        check="stale_subject_reference",
                        entity=cls.id,
                        description=f"Fach {subject_id} existiert nicht mehr (wird ignoriert).",
                    ))
        return violations

    def _check_combination_subjects(self, data: SchoolData) -> list[ValidationViolation]:
        known = {s.id for s in data.subjects}
        violations: list[ValidationViolation] = []
        for comb in data.combinations:
            for subject_id in comb.all_subject_ids:
                if subject_id not in known:
                    violations.append(ValidationViolation(
                        severity="warning",
                        check="stale_combination_subject",
                        entity=comb.id,
                        description=(
                            f"Kombination {comb.code}: Fach {subject_id} existiert nicht mehr."
                        ),
                    ))
        return violations

    def _check_class_combinations(self, data: SchoolData) -> list[ValidationViolation]:
        """Unbekannte, inaktive oder auf O-Level wirkungslose Kombinationen."""
        combinations = {c.id: c for c in data.combinations}
        violations: list[ValidationViolation] = []
        for cls in data.classes:
            for comb_id in cls.combination_ids:
                comb = combinations.get(comb_id)
                if comb is None:
                    violations.append(ValidationViolation(
                        severity="warning",
                        check="unknown_combination",
                        entity=cls.id,
                        description=f"Kombination {comb_id} existiert nicht.",
                    ))
                elif not cls.is_a_level:
                    violations.append(ValidationViolation(
                        severity="warning",
                        check="combination_on_o_level",
                        entity=cls.id,
                        description=(
                            f"O-Level-Klasse mit Kombination {comb.code} – "
                            f"Kombinationen gelten nur für A-Level und werden ignoriert."
                        ),
                    ))
                elif not comb.is_active:
                    violations.append(ValidationViolation(
                        severity="warning",
                        check="inactive_combination",
                        entity=cls.id,
                        description=f"Kombination {comb.code} ist deaktiviert.",
                    ))
        return violations

    def _check_teacher_references(self, data: SchoolData) -> list[ValidationViolation]:
        """Zuweisungen an Lehrkräfte, die es nicht gibt."""
        known = {t.id for t in data.teachers}
        violations: list[ValidationViolation] = []
        for cls in data.classes:
            for row in cls.subjects:
                if row.teacher is not None and row.teacher not in known:
                    violations.append(ValidationViolation(
                        severity="error",
                        check="unknown_teacher",
                        entity=cls.id,
                        description=(
                            f"Fach {row.subject}: Lehrkraft {row.teacher} existiert nicht."
                        ),
                    ))
        return violations

    def _check_qualifications(self, data: SchoolData) -> list[ValidationViolation]:
        """Lehrkräfte, die ein Fach ohne Qualifikation unterrichten."""
        teachers = {t.id: t for t in data.teachers}
        violations: list[ValidationViolation] = []
        for cls in data.classes:
            for row in cls.subjects:
                teacher = teachers.get(row.teacher) if row.teacher else None
                if teacher is None or teacher.is_admin:
                    continue
                if not teacher.is_qualified_for(row.subject):
                    violations.append(ValidationViolation(
                        severity="warning",
                        check="unqualified_teacher",
                        entity=cls.id,
                        description=(
                            f"Fach {row.subject}: {teacher.name} ({teacher.id}) "
                            f"ist dafür nicht qualifiziert."
                        ),
                    ))
        return violations

"""SubjectAssignmentService: Einstiegspunkt für CLI, Handler und Batch-Jobs.

Verbindet Repositories, Fächerauflösung und Reconciler. Alle Schreibzugriffe
auf die Zuweisungen einer Klasse laufen pro Klasse serialisiert
(Lesen → Zusammenführen → Schreiben) und werden zusätzlich über die
Klassen-Version abgesichert.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from analysis.diff import diff_assignments
from models.reference import normalize_ref
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher
from resolution.builder import EffectiveSubjectBuilder
from resolution.catalog import SubjectCatalog
from resolution.combinations import CombinationResolver
from resolution.errors import (
    ConcurrentModificationError,
    InvalidAssignmentError,
    NotFoundError,
)
from resolution.qualification import filter_for_teacher
from resolution.reconciler import AssignmentMap, reconcile
from resolution.repositories import (
    ClassRepository,
    CombinationRepository,
    InMemoryRepository,
    SubjectRepository,
    TeacherRepository,
    combination_view,
)

logger = logging.getLogger(__name__)


class SubjectAssignmentService:
    """Fächerangebot lesen und Lehrerzuweisungen schreiben."""

    def __init__(
        self,
        subjects: SubjectRepository,
        combinations: CombinationRepository,
        classes: ClassRepository,
        teachers: TeacherRepository,
        lock_timeout: float = 5.0,
    ) -> None:
        self._classes = classes
        self._teachers = teachers
        self._catalog = SubjectCatalog(subjects)
        self._builder = EffectiveSubjectBuilder(
            self._catalog, CombinationResolver(combinations, self._catalog)
        )
        self._lock_timeout = lock_timeout
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @classmethod
    def from_repository(cls, repo: InMemoryRepository,
                        lock_timeout: float = 5.0) -> "SubjectAssignmentService":
        """Service über einem einzigen In-Memory- oder JSON-Repository."""
        return cls(repo, combination_view(repo), repo, repo, lock_timeout=lock_timeout)

    # ─── Lesen ───

    def resolve_effective_subjects(self, class_id: str) -> list[Subject]:
        """Effektives Fächerangebot der Klasse (siehe ``EffectiveSubjectBuilder``)."""
        return self._builder.build(self._require_class(class_id))

    def resolve_teachable_subjects(self, class_id: str, teacher_id: str) -> list[Subject]:
        """Fächer der Klasse, die die Lehrkraft unterrichten darf.

        Administratoren sehen das vollständige Angebot.
        """
        teacher = self._require_teacher(teacher_id)
        effective = self.resolve_effective_subjects(class_id)
        if teacher.is_admin:
            return effective
        return filter_for_teacher(effective, teacher.subjects)

    def classes_for_teacher(self, teacher_id: str) -> list[SchoolClass]:
        """Klassen, in denen die Lehrkraft mindestens ein Fach unterrichtet."""
        self._require_teacher(teacher_id)
        return self._classes.find_by_teacher(teacher_id)

    def class_teachers(self, class_id: str) -> list[Teacher]:
        """Alle in der Klasse eingesetzten Lehrkräfte, jede einmal.

        Reihenfolge wie in den Fach-Zeilen; unbekannte Lehrer-IDs fehlen.
        """
        teachers: dict[str, Teacher] = {}
        for teacher_id in self._require_class(class_id).assignment_map().values():
            if teacher_id is None or teacher_id in teachers:
                continue
            teacher = self._teachers.find_teacher(teacher_id)
            if teacher is None:
                logger.warning(f"Klasse {class_id}: Lehrkraft {teacher_id} existiert nicht")
                continue
            teachers[teacher_id] = teacher
        return list(teachers.values())

    def is_teacher_authorized(self, teacher_id: str, class_id: str, subject_id: str) -> bool:
        """Darf die Lehrkraft das Fach in dieser Klasse unterrichten?"""
        teachable = self.resolve_teachable_subjects(class_id, teacher_id)
        return any(s.id == subject_id for s in teachable)

    # ─── Schreiben ───

    def reconcile_and_save(self, class_id: str, proposed_changes: dict) -> AssignmentMap:
        """Wendet ein Teil-Update an und speichert die vollständige Tabelle.

        Raises:
            NotFoundError: Klasse oder eine genannte Lehrkraft existiert nicht.
            InvalidAssignmentError: Fach gehört nicht zum Angebot der Klasse.
            ConcurrentModificationError: paralleler Schreibzugriff.
        """
        changes = _normalize_changes(proposed_changes)
        with self._serialized(class_id):
            return self._reconcile_locked(class_id, changes)

    def self_assign(self, class_id: str, teacher_id: str,
                    subject_ids: Iterable[str]) -> AssignmentMap:
        """Eine Lehrkraft trägt sich selbst für Fächer der Klasse ein.

        Erlaubt sind nur Fächer aus ``resolve_teachable_subjects``; geprüft
        wird unter dem Klassen-Lock, gegen denselben Stand, der gespeichert wird.
        """
        subject_ids = [s for s in (normalize_ref(i) for i in subject_ids) if s]
        with self._serialized(class_id):
            teachable = {s.id for s in self.resolve_teachable_subjects(class_id, teacher_id)}
            not_teachable = [s for s in subject_ids if s not in teachable]
            if not_teachable:
                raise InvalidAssignmentError(
                    class_id, not_teachable,
                    reason=f"nicht in den Qualifikationen von {teacher_id}",
                )
            return self._reconcile_locked(class_id, {s: teacher_id for s in subject_ids})

    def assign_teacher_to_all(self, class_id: str, teacher_id: str) -> AssignmentMap:
        """Setzt eine Lehrkraft für alle Fach-Zeilen der Klasse.

        Zeilen mit veralteten Fächern bleiben unverändert. Hat die Klasse
        keine gültige Zeile, wird nichts gespeichert.
        """
        with self._serialized(class_id):
            self._require_teacher(teacher_id)
            school_class = self._require_class(class_id)
            allowed = self._builder.build_ids(school_class)
            rows = [s for s in school_class.subject_ids if s in allowed]
            if not rows:
                logger.warning(f"Klasse {class_id}: keine Fach-Zeilen zum Besetzen")
                return school_class.assignment_map()
            return self._reconcile_locked(class_id, {s: teacher_id for s in rows})

    def add_subjects(self, class_id: str, subject_ids: Iterable[str]) -> AssignmentMap:
        """Ordnet Fächer direkt der Klasse zu (unbesetzt).

        Unbekannte Fach-IDs werden übersprungen, bereits vorhandene Fächer
        behalten ihre Lehrkraft.
        """
        wanted = [s for s in (normalize_ref(i) for i in subject_ids) if s]
        with self._serialized(class_id):
            self._require_class(class_id)
            found = self._catalog.get_by_ids(wanted)
            skipped = [s for s in wanted if s not in found]
            if skipped:
                logger.warning(f"Klasse {class_id}: unbekannte Fächer übersprungen: {skipped}")

            version = self._classes.get_version(class_id)
            current = self._classes.get_current_assignments(class_id)
            new_rows = {s: None for s in found if s not in current}
            if not new_rows:
                return current
            return self._save(class_id, current, reconcile(current, new_rows), version)

    def sync_effective_subjects(self, class_id: str) -> AssignmentMap:
        """Legt für jedes Fach des Angebots ohne Zeile eine unbesetzte Zeile an."""
        with self._serialized(class_id):
            school_class = self._require_class(class_id)
            version = self._classes.get_version(class_id)
            current = self._classes.get_current_assignments(class_id)
            missing = {
                s.id: None for s in self._builder.build(school_class) if s.id not in current
            }
            if not missing:
                return current
            return self._save(class_id, current, reconcile(current, missing), version)

    # ─── intern ───

    def _reconcile_locked(self, class_id: str, changes: AssignmentMap) -> AssignmentMap:
        """Lesen → Zusammenführen → Schreiben; der Aufrufer hält den Klassen-Lock."""
        school_class = self._require_class(class_id)
        for teacher_id in {t for t in changes.values() if t is not None}:
            self._require_teacher(teacher_id)

        version = self._classes.get_version(class_id)
        current = self._classes.get_current_assignments(class_id)
        allowed = self._builder.build_ids(school_class)
        result = reconcile(current, changes, allowed, class_id=class_id)
        return self._save(class_id, current, result, version)

    def _save(self, class_id: str, before: AssignmentMap, after: AssignmentMap,
              version: int) -> AssignmentMap:
        self._classes.save_assignments(class_id, after, expected_version=version)
        diff = diff_assignments(before, after)
        logger.info(f"Klasse {class_id}: {diff.summary()}")
        return after

    def _require_class(self, class_id: str) -> SchoolClass:
        school_class = self._classes.find_by_id(class_id)
        if school_class is None:
            raise NotFoundError("Klasse", class_id)
        return school_class

    def _require_teacher(self, teacher_id: str) -> Teacher:
        teacher = self._teachers.find_teacher(teacher_id)
        if teacher is None:
            raise NotFoundError("Lehrkraft", teacher_id)
        return teacher

    @contextmanager
    def _serialized(self, class_id: str) -> Iterator[None]:
        # Locks nur für existierende Klassen anlegen
        self._require_class(class_id)
        with self._locks_guard:
            lock = self._locks.setdefault(class_id, threading.Lock())
        if not lock.acquire(timeout=self._lock_timeout):
            raise ConcurrentModificationError(class_id)
        try:
            yield
        finally:
            lock.release()


def _normalize_changes(proposed: dict) -> AssignmentMap:
    """Schlüssel und Werte eines Updates auf IDs reduzieren."""
    changes: AssignmentMap = {}
    for subject_ref, teacher_ref in proposed.items():
        subject_id = normalize_ref(subject_ref)
        if subject_id is None:
            raise ValueError("Update enthält ein Fach ohne ID.")
        changes[subject_id] = normalize_ref(teacher_ref)
    return changes

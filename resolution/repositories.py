"""Repository-Schnittstellen und In-Memory-Implementierung.

Die Auflösung selbst macht keine I/O; alles, was sie braucht, kommt über
diese Schnittstellen herein. Die Implementierungen liefern immer
normalisierte IDs (siehe ``models.reference``).
"""

import logging
import threading
from typing import Iterable, Optional, Protocol

from models.combination import SubjectCombination
from models.school_class import SchoolClass
from models.school_data import SchoolData
from models.subject import EducationLevel, Subject
from models.teacher import Teacher
from resolution.errors import ConcurrentModificationError, NotFoundError

logger = logging.getLogger(__name__)


class SubjectRepository(Protocol):
    def find_by_ids(self, ids: Iterable[str]) -> list[Subject]: ...

    def find_compulsory(self, education_level: EducationLevel) -> list[Subject]: ...


class CombinationRepository(Protocol):
    def find_by_id(self, combination_id: str) -> Optional[SubjectCombination]: ...


class ClassRepository(Protocol):
    def find_by_id(self, class_id: str) -> Optional[SchoolClass]: ...

    def find_by_teacher(self, teacher_id: str) -> list[SchoolClass]: ...

    def get_current_assignments(self, class_id: str) -> dict[str, Optional[str]]: ...

    def get_version(self, class_id: str) -> int: ...

    def save_assignments(self, class_id: str, assignments: dict[str, Optional[str]],
                         expected_version: Optional[int] = None) -> int: ...


class TeacherRepository(Protocol):
    def find_teacher(self, teacher_id: str) -> Optional[Teacher]: ...


class InMemoryRepository:
    """Alle vier Repositories über einem ``SchoolData``-Snapshot.

    Lesende Aufrufe sehen einen konsistenten Stand; ``save_assignments``
    prüft die Klassen-Version und erhöht sie.
    """

    def __init__(self, data: SchoolData) -> None:
        self._data = data
        self._lock = threading.RLock()

    @property
    def data(self) -> SchoolData:
        with self._lock:
            return self._data

    # ─── Fächer ───

    def find_by_ids(self, ids: Iterable[str]) -> list[Subject]:
        wanted = set(ids)
        with self._lock:
            return [s for s in self._data.subjects if s.id in wanted]

    def find_compulsory(self, education_level: EducationLevel) -> list[Subject]:
        with self._lock:
            return [
                s for s in self._data.subjects
                if s.is_compulsory and s.offered_at(education_level)
            ]

    # ─── Kombinationen ───

    def find_combination(self, combination_id: str) -> Optional[SubjectCombination]:
        with self._lock:
            return self._data.combination(combination_id)

    # ─── Klassen ───

    def find_by_id(self, class_id: str) -> Optional[SchoolClass]:
        with self._lock:
            return self._data.school_class(class_id)

    def find_by_teacher(self, teacher_id: str) -> list[SchoolClass]:
        with self._lock:
            return [
                c for c in self._data.classes
                if any(row.teacher == teacher_id for row in c.subjects)
            ]

    def get_current_assignments(self, class_id: str) -> dict[str, Optional[str]]:
        return self._require_class(class_id).assignment_map()

    def get_version(self, class_id: str) -> int:
        return self._require_class(class_id).version

    def save_assignments(self, class_id: str, assignments: dict[str, Optional[str]],
                         expected_version: Optional[int] = None) -> int:
        """Schreibt die Zuweisungen atomar; gibt die neue Version zurück."""
        with self._lock:
            current = self._require_class(class_id)
            if expected_version is not None and current.version != expected_version:
                raise ConcurrentModificationError(
                    class_id, expected=expected_version, actual=current.version
                )
            updated = current.with_assignments(assignments).model_copy(
                update={"version": current.version + 1}
            )
            classes = [updated if c.id == class_id else c for c in self._data.classes]
            data = self._data.model_copy(update={"classes": classes})
            # erst schreiben, dann übernehmen: schlägt die Ablage fehl, bleibt der alte Stand
            self._persist(data)
            self._data = data
            logger.debug(f"Klasse {class_id}: Version {updated.version} gespeichert")
            return updated.version

    # ─── Lehrkräfte ───

    def find_teacher(self, teacher_id: str) -> Optional[Teacher]:
        with self._lock:
            return self._data.teacher(teacher_id)

    # ─── intern ───

    def _require_class(self, class_id: str) -> SchoolClass:
        school_class = self.find_by_id(class_id)
        if school_class is None:
            raise NotFoundError("Klasse", class_id)
        return school_class

    def _persist(self, data: SchoolData) -> None:
        """Hook für dateibasierte Ableitungen; In-Memory: nichts zu tun."""


class _CombinationView:
    """Adapter: ``CombinationRepository.find_by_id`` auf ``find_combination``."""

    def __init__(self, repo: InMemoryRepository) -> None:
        self._repo = repo

    def find_by_id(self, combination_id: str) -> Optional[SubjectCombination]:
        return self._repo.find_combination(combination_id)


def combination_view(repo: InMemoryRepository) -> CombinationRepository:
    """Liefert das Kombinations-Repository eines ``InMemoryRepository``."""
    return _CombinationView(repo)

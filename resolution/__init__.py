"""Fächerauflösung und Abgleich der Lehrerzuweisungen pro Klasse."""

from .builder import EffectiveSubjectBuilder
from .catalog import SubjectCatalog
from .combinations import CombinationResolver, ResolvedCombination
from .errors import (
    ConcurrentModificationError,
    InvalidAssignmentError,
    NotFoundError,
    ResolutionError,
)
from .qualification import filter_for_teacher
from .reconciler import reconcile
from .repositories import InMemoryRepository
from .service import SubjectAssignmentService

__all__ = [
    "EffectiveSubjectBuilder",
    "SubjectCatalog",
    "CombinationResolver",
    "ResolvedCombination",
    "ConcurrentModificationError",
    "InvalidAssignmentError",
    "NotFoundError",
    "ResolutionError",
    "filter_for_teacher",
    "reconcile",
    "InMemoryRepository",
    "SubjectAssignmentService",
]

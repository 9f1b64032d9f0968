from models.subject import Subject, SubjectType, EducationLevel
from models.combination import SubjectCombination
from models.teacher import Teacher
from models.school_class import SchoolClass, SubjectAssignment
from models.school_data import SchoolData

__all__ = [
    "Subject",
    "SubjectType",
    "EducationLevel",
    "SubjectCombination",
    "Teacher",
    "SchoolClass",
    "SubjectAssignment",
    "SchoolData",
]

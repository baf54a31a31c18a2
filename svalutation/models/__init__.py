from .school_class import SchoolClass
from .student import Student
from .teacher import Teacher, classes_teachers
from .remark import Remark
from .observation import Observation
from .credential import Credential

__all__ = [
    "SchoolClass",
    "Student",
    "Teacher",
    "classes_teachers",
    "Remark",
    "Observation",
    "Credential"
]

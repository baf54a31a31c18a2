from sqlalchemy import Column, Integer, String, ForeignKey, Table
from sqlalchemy.orm import relationship
from ..core.database import Base


classes_teachers = Table(
    "classes_teachers",
    Base.metadata,
    Column("teacher_id", Integer, ForeignKey("teachers.id"), primary_key=True),
    Column("class_id", Integer, ForeignKey("classes.id"), primary_key=True),
)


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    surname = Column(String, nullable=False)

    classes = relationship(
        "SchoolClass",
        secondary=classes_teachers,
        back_populates="teachers",
        order_by="SchoolClass.id",
    )
    observations = relationship("Observation", back_populates="teacher")

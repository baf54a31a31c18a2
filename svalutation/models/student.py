from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from ..core.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    surname = Column(String, nullable=False)
    # Older databases allow students without a class
    class_id = Column("class", Integer, ForeignKey("classes.id"), nullable=True, index=True)

    school_class = relationship("SchoolClass", back_populates="students")
    observations = relationship("Observation", back_populates="student")

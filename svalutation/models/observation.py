from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..core.database import Base


class Observation(Base):
    __tablename__ = "observations"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column("teacher", Integer, ForeignKey("teachers.id"), nullable=False, index=True)
    student_id = Column("student", Integer, ForeignKey("students.id"), nullable=False, index=True)
    remark_id = Column("remark", Integer, ForeignKey("remarks.id"), nullable=False)
    achieved = Column(Boolean, nullable=False, default=False)
    date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    teacher = relationship("Teacher", back_populates="observations")
    student = relationship("Student", back_populates="observations")
    remark = relationship("Remark", back_populates="observations")

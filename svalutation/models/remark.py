from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..core.database import Base


class Remark(Base):
    __tablename__ = "remarks"

    id = Column(Integer, primary_key=True, index=True)
    skill = Column(String, nullable=False)
    level = Column(Integer, nullable=False)
    description = Column(String, nullable=False, default="")

    observations = relationship("Observation", back_populates="remark")

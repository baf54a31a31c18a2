from sqlalchemy import Column, String
from ..core.database import Base


class Credential(Base):
    __tablename__ = "credentials"

    username = Column("user", String, primary_key=True)
    # bcrypt hash, never the plain password
    password = Column(String, nullable=False)

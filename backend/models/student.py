"""Student model definitions."""

from sqlalchemy import Column, Integer, String
from backend.database import Base


class Student(Base):
    """Represents a registered student.

    ``password`` always holds a bcrypt hash, never the plaintext.
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String)
    last_name = Column(String)
    username = Column(String)
    email = Column(String, unique=True, index=True, nullable=False)
    contact = Column(String)
    password = Column(String, nullable=False)

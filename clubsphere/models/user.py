"""User model definitions."""

from sqlalchemy import Column, String
from clubsphere.database import Base, UTCDateTime


class UserRow(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    school_id = Column(String, nullable=False)
    role = Column(String, nullable=False, default="student")  # student/leader/admin
    created_at = Column(UTCDateTime, nullable=False)

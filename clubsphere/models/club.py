"""Club model definitions."""

from sqlalchemy import Boolean, Column, ForeignKey, String, Text
from clubsphere.database import Base, UTCDateTime


class ClubRow(Base):
    """Represents a school club. Deleting a club only clears is_active."""
    __tablename__ = "clubs"

    id = Column(String(36), primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    leader_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    meeting_time = Column(String, nullable=True)
    meeting_location = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, nullable=False)

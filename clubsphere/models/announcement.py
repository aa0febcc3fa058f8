"""Announcement model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from clubsphere.database import Base, UTCDateTime


class AnnouncementRow(Base):
    """Represents a message posted to a club.

    seq follows insertion order and breaks ties between equal created_at values.
    """
    __tablename__ = "announcements"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    club_id = Column(String(36), ForeignKey("clubs.id"), nullable=False, index=True)
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(UTCDateTime, nullable=False, index=True)

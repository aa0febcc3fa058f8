"""Membership model definitions."""

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint
from clubsphere.database import Base, UTCDateTime


class MembershipRow(Base):
    """Links a user to a club with a role."""
    __tablename__ = "memberships"
    __table_args__ = (UniqueConstraint("user_id", "club_id", name="uq_memberships_user_club"),)

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    club_id = Column(String(36), ForeignKey("clubs.id"), nullable=False, index=True)
    role = Column(String, nullable=False, default="member")  # member/officer/leader
    joined_at = Column(UTCDateTime, nullable=False)

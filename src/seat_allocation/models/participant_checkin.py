"""
ParticipantCheckIn model - rows written by the check-in desk.
The allocation core only counts them to resolve a team's size.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Uuid

from seat_allocation.core.database import Base


class ParticipantCheckIn(Base):
    __tablename__ = "participant_checkins"

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Uuid, nullable=False, index=True)
    participant_name = Column(String(200), nullable=False)
    participant_role = Column(String(20), nullable=False, default="member")  # 'leader' or 'member'
    volunteer_id = Column(Uuid, nullable=True)
    checked_in_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<ParticipantCheckIn(id={self.id}, team_id={self.team_id}, name='{self.participant_name}')>"

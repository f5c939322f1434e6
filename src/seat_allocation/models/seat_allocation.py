"""
SeatAllocation model - the persisted fact that a team occupies a seat

Seat, room, block, team and volunteer are referenced by id only; the record
also snapshots the display names that were current at allocation time.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Uuid

from seat_allocation.core.database import Base


class SeatAllocation(Base):
    __tablename__ = "seat_allocations"

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Uuid, nullable=False, unique=True, index=True)  # one seat per team
    seat_id = Column(Integer, nullable=False, index=True)
    block_id = Column(Integer, nullable=False)
    room_id = Column(Integer, nullable=False, index=True)
    allocated_by = Column(Uuid, nullable=False)  # volunteer id, not validated here
    team_size = Column(Integer, nullable=False)
    allocated_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    block_name = Column(String(100), nullable=False)
    room_name = Column(String(100), nullable=False)
    seat_label = Column(String(20), nullable=False)

    def __repr__(self):
        return (f"<SeatAllocation(id={self.id}, team_id={self.team_id}, seat_id={self.seat_id}, "
                f"room='{self.room_name}', seat='{self.seat_label}', size={self.team_size})>")

    @property
    def location_label(self) -> str:
        """Human-readable location, e.g. 'Main Block / Lab 1 / A1'"""
        return f"{self.block_name} / {self.room_name} / {self.seat_label}"

"""
Seat model - CRITICAL for concurrency control
`is_available` is the exclusivity bit; it is only flipped by a conditional
UPDATE guarded on its previous value.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from seat_allocation.core.database import Base


class Seat(Base):
    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint('room_id', 'row_number', 'column_number', name='uq_seat_grid_position'),
        # Regenerated grids must never reuse ids still held by allocation records
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    row_number = Column(Integer, nullable=False)
    column_number = Column(Integer, nullable=False)
    seat_label = Column(String(20), nullable=False)  # 'A1', 'C4', 'Row271'
    team_size_preference = Column(Integer, nullable=True, index=True)  # NULL = any size
    is_available = Column(Boolean, nullable=False, default=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    room = relationship("Room", back_populates="seats")

    def __repr__(self):
        return (f"<Seat(id={self.id}, room_id={self.room_id}, label='{self.seat_label}', "
                f"pref={self.team_size_preference}, available={self.is_available})>")

    @property
    def grid_position(self) -> tuple:
        return (self.row_number, self.column_number)

"""
Room model - a bookable space inside a block
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from seat_allocation.core.database import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    block_id = Column(Integer, ForeignKey("blocks.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False, default=0)
    # Cached sum of allocated team sizes; only changed by atomic SQL increments
    current_occupancy = Column(Integer, nullable=False, default=0)
    display_order = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    block = relationship("Block", back_populates="rooms")
    seats = relationship("Seat", back_populates="room", passive_deletes=True)

    def __repr__(self):
        return (f"<Room(id={self.id}, block_id={self.block_id}, name='{self.name}', "
                f"capacity={self.capacity}, occupancy={self.current_occupancy})>")

    @property
    def utilization(self) -> float:
        """Occupancy as a percentage of capacity"""
        if not self.capacity:
            return 0.0
        return round((self.current_occupancy / self.capacity) * 100, 1)

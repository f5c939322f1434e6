"""
Block model - a building or zone that groups rooms
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship

from seat_allocation.core.database import Base


class Block(Base):
    __tablename__ = "blocks"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    city = Column(String(50), nullable=False, index=True)
    display_order = Column(Integer, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    rooms = relationship("Room", back_populates="block", order_by="Room.display_order")

    def __repr__(self):
        return f"<Block(id={self.id}, name='{self.name}', city='{self.city}', order={self.display_order})>"

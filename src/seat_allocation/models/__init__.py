"""
SQLAlchemy models for the seat allocation core

Import all models here for easy access and to ensure proper relationship setup.
"""
from seat_allocation.core.database import Base

# Import all models to register them with SQLAlchemy
from seat_allocation.models.block import Block
from seat_allocation.models.room import Room
from seat_allocation.models.seat import Seat
from seat_allocation.models.seat_allocation import SeatAllocation
from seat_allocation.models.participant_checkin import ParticipantCheckIn

# Export all models
__all__ = [
    "Base",
    "Block",
    "Room",
    "Seat",
    "SeatAllocation",
    "ParticipantCheckIn",
]

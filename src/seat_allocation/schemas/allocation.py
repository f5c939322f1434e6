"""Pydantic schemas for allocation records and statistics"""
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class AllocationDetail(BaseModel):
    """An allocation record joined with seat / room / block display names"""
    id: int
    team_id: UUID
    seat_id: int
    block_id: int
    room_id: int
    block_name: str
    room_name: str
    seat_label: str
    allocated_by: UUID
    team_size: int
    allocated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomAllocation(BaseModel):
    """A team's seat inside one room, with its grid position"""
    team_id: UUID
    seat_id: int
    seat_label: str
    row_number: Optional[int] = None  # None when the seat was wiped by grid regeneration
    column_number: Optional[int] = None
    team_size: int


class RoomStats(BaseModel):
    room_id: int
    block_name: str
    room_name: str
    capacity: int
    current_occupancy: int  # sum of allocated team sizes
    occupancy_counter: int  # rooms.current_occupancy as stored
    available_seats: int


class AllocationStats(BaseModel):
    total_seats: int = 0
    available_seats: int = 0
    allocated_seats: int = 0
    total_participants_allocated: int = 0
    teams_by_size: Dict[int, int] = Field(default_factory=dict)
    room_stats: List[RoomStats] = Field(default_factory=list)

"""
Pydantic schemas for input validation and read models
"""
from seat_allocation.schemas.catalog import (
    BlockCreate,
    BlockUpdate,
    BlockResponse,
    RoomCreate,
    RoomResponse,
    SeatGridCreate,
    SeatPreferenceUpdate,
    SeatResponse,
)
from seat_allocation.schemas.allocation import (
    AllocationDetail,
    AllocationStats,
    RoomAllocation,
    RoomStats,
)

__all__ = [
    # Catalog
    "BlockCreate",
    "BlockUpdate",
    "BlockResponse",
    "RoomCreate",
    "RoomResponse",
    "SeatGridCreate",
    "SeatPreferenceUpdate",
    "SeatResponse",
    # Allocations
    "AllocationDetail",
    "AllocationStats",
    "RoomAllocation",
    "RoomStats",
]

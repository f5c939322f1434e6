"""
Pydantic schemas for the Block / Room / Seat catalog
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BlockCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Block name")

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class BlockUpdate(BaseModel):
    """Partial update; unset fields are left unchanged"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    display_order: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class BlockResponse(BaseModel):
    id: int
    name: str
    city: str
    display_order: int
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomCreate(BaseModel):
    block_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=100, description="Room name")
    capacity: int = Field(0, ge=0, description="Informational capacity; reset by grid generation")

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class RoomResponse(BaseModel):
    id: int
    block_id: int
    name: str
    capacity: int
    current_occupancy: int
    display_order: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class SeatGridCreate(BaseModel):
    room_id: int = Field(..., gt=0)
    rows: int = Field(..., ge=1)
    cols: int = Field(..., ge=1)


class SeatPreferenceUpdate(BaseModel):
    seat_ids: List[int] = Field(..., min_length=1)
    team_size: Optional[int] = Field(None, ge=1, description="None clears the preference")


class SeatResponse(BaseModel):
    id: int
    room_id: int
    row_number: int
    column_number: int
    seat_label: str
    team_size_preference: Optional[int] = None
    is_available: bool
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

"""
Allocation query service - read-side lookups

Plain snapshot reads: no locks, no writes. Absence is reported as None or an
empty result, never as an exception.
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocation.core.config import settings
from seat_allocation.models import Block, Room, Seat, SeatAllocation
from seat_allocation.schemas import AllocationDetail, AllocationStats, RoomAllocation, RoomStats


def _detail(allocation: SeatAllocation, seat_label, room_name, block_name) -> AllocationDetail:
    # Prefer current names; fall back to the snapshot when the row is gone
    detail = AllocationDetail.model_validate(allocation)
    return detail.model_copy(update={
        "seat_label": seat_label or allocation.seat_label,
        "room_name": room_name or allocation.room_name,
        "block_name": block_name or allocation.block_name,
    })


def _with_names(query):
    return (
        query
        .outerjoin(Seat, Seat.id == SeatAllocation.seat_id)
        .outerjoin(Room, Room.id == SeatAllocation.room_id)
        .outerjoin(Block, Block.id == SeatAllocation.block_id)
    )


class AllocationQueryService:

    @staticmethod
    async def get_team_allocation(db: AsyncSession, team_id: UUID) -> Optional[AllocationDetail]:
        """The team's allocation with seat / room / block names, or None if unseated"""
        query = _with_names(
            select(SeatAllocation, Seat.seat_label, Room.name, Block.name)
        ).where(SeatAllocation.team_id == team_id)

        row = (await db.execute(query)).first()
        if row is None:
            return None
        return _detail(*row)

    @staticmethod
    async def list_allocations(db: AsyncSession) -> List[AllocationDetail]:
        """All allocations, newest first"""
        query = _with_names(
            select(SeatAllocation, Seat.seat_label, Room.name, Block.name)
        ).order_by(SeatAllocation.allocated_at.desc(), SeatAllocation.id.desc())

        result = await db.execute(query)
        return [_detail(*row) for row in result.all()]

    @staticmethod
    async def get_room_allocations(db: AsyncSession, room_id: int) -> List[RoomAllocation]:
        """
        Teams seated in one room, with grid positions, in row/column order.

        Records whose seat was wiped by grid regeneration come last, with
        their recorded label and no grid position.
        """
        result = await db.execute(
            select(SeatAllocation, Seat)
            .outerjoin(Seat, Seat.id == SeatAllocation.seat_id)
            .where(SeatAllocation.room_id == room_id)
            .order_by(
                Seat.id.is_(None),
                Seat.row_number.asc(),
                Seat.column_number.asc(),
                SeatAllocation.id.asc(),
            )
        )
        return [
            RoomAllocation(
                team_id=allocation.team_id,
                seat_id=allocation.seat_id,
                seat_label=seat.seat_label if seat else allocation.seat_label,
                row_number=seat.row_number if seat else None,
                column_number=seat.column_number if seat else None,
                team_size=allocation.team_size,
            )
            for allocation, seat in result.all()
        ]

    @staticmethod
    async def get_allocation_stats(db: AsyncSession) -> AllocationStats:
        """Totals plus a per-room breakdown for active rooms in active blocks"""
        total_seats = await db.scalar(
            select(func.count(Seat.id)).where(Seat.is_active == True)
        )
        available_seats = await db.scalar(
            select(func.count(Seat.id)).where(Seat.is_active == True, Seat.is_available == True)
        )
        allocated_seats = await db.scalar(select(func.count(SeatAllocation.id)))
        total_participants = await db.scalar(
            select(func.coalesce(func.sum(SeatAllocation.team_size), 0))
        )

        size_rows = await db.execute(
            select(SeatAllocation.team_size, func.count(SeatAllocation.id))
            .group_by(SeatAllocation.team_size)
            .order_by(SeatAllocation.team_size)
        )
        teams_by_size = {size: count for size, count in size_rows.all()}

        # Derived from the records so a drifted counter cannot skew the breakdown
        occupied_in_room = (
            select(func.coalesce(func.sum(SeatAllocation.team_size), 0))
            .where(SeatAllocation.room_id == Room.id)
            .correlate(Room)
            .scalar_subquery()
        )
        available_in_room = func.coalesce(
            func.sum(case((Seat.is_available == True, 1), else_=0)), 0
        )
        room_rows = await db.execute(
            select(
                Room.id,
                Block.name,
                Room.name,
                Room.capacity,
                occupied_in_room.label("current_occupancy"),
                Room.current_occupancy.label("occupancy_counter"),
                available_in_room.label("available_seats"),
            )
            .join(Block, Block.id == Room.block_id)
            .outerjoin(Seat, (Seat.room_id == Room.id) & (Seat.is_active == True))
            .where(
                Room.is_active == True,
                Block.is_active == True,
                Block.city == settings.SUPPORTED_CITY,
            )
            .group_by(
                Room.id, Block.name, Room.name, Room.capacity, Room.current_occupancy,
                Block.display_order, Room.display_order,
            )
            .order_by(Block.display_order.asc(), Room.display_order.asc())
        )

        room_stats = [
            RoomStats(
                room_id=room_id,
                block_name=block_name,
                room_name=room_name,
                capacity=capacity,
                current_occupancy=int(occupancy),
                occupancy_counter=counter,
                available_seats=int(available),
            )
            for room_id, block_name, room_name, capacity, occupancy, counter, available in room_rows.all()
        ]

        return AllocationStats(
            total_seats=total_seats or 0,
            available_seats=available_seats or 0,
            allocated_seats=allocated_seats or 0,
            total_participants_allocated=int(total_participants or 0),
            teams_by_size=teams_by_size,
            room_stats=room_stats,
        )

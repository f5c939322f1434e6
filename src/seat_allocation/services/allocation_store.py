"""
Allocation store - transactional primitives for seat state and allocation records

Every method runs inside the caller's transaction; none of them commits.
"""
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import select, func, update, delete, case
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocation.models import Room, Seat, SeatAllocation


class AllocationStore:
    """Persistence for seat exclusivity, room occupancy and allocation records"""

    @staticmethod
    async def find_by_team(db: AsyncSession, team_id: UUID) -> Optional[SeatAllocation]:
        result = await db.execute(
            select(SeatAllocation).where(SeatAllocation.team_id == team_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def claim_seat(db: AsyncSession, seat_id: int) -> bool:
        """
        Compare-and-swap the seat's availability bit from true to false.

        Returns False when no row matched, i.e. another transaction already
        holds the seat.
        """
        result = await db.execute(
            update(Seat)
            .where(Seat.id == seat_id, Seat.is_available == True)
            .values(is_available=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    async def free_seat(db: AsyncSession, seat_id: int) -> bool:
        result = await db.execute(
            update(Seat)
            .where(Seat.id == seat_id, Seat.is_available == False)
            .values(is_available=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    async def adjust_room_occupancy(db: AsyncSession, room_id: int, delta: int) -> None:
        """Atomic in-database increment (or decrement, floored at zero)"""
        if delta >= 0:
            new_value = Room.current_occupancy + delta
        else:
            new_value = case(
                (Room.current_occupancy + delta < 0, 0),
                else_=Room.current_occupancy + delta,
            )

        await db.execute(
            update(Room)
            .where(Room.id == room_id)
            .values(current_occupancy=new_value)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    async def insert_record(db: AsyncSession, allocation: SeatAllocation) -> SeatAllocation:
        """Insert and flush so a duplicate team_id fails inside the transaction"""
        db.add(allocation)
        await db.flush()
        return allocation

    @staticmethod
    async def delete_record(db: AsyncSession, allocation_id: int) -> bool:
        result = await db.execute(
            delete(SeatAllocation)
            .where(SeatAllocation.id == allocation_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    async def occupancy_by_room(db: AsyncSession) -> Dict[int, int]:
        """Sum of allocated team sizes per room, derived from the records"""
        result = await db.execute(
            select(SeatAllocation.room_id, func.coalesce(func.sum(SeatAllocation.team_size), 0))
            .group_by(SeatAllocation.room_id)
        )
        return {room_id: int(total) for room_id, total in result.all()}

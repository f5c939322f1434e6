"""
Placement policy - chooses the next seat for a team

Strategy A takes the first eligible seat tagged for exactly the team's size;
strategy B takes the first eligible seat of any preference. Both walk seats in
(block order, room order, row, column) so the same catalog state always yields
the same candidate.
"""
from dataclasses import dataclass
from typing import Collection, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocation.core.config import settings
from seat_allocation.models import Block, Room, Seat

PREFERENCE_MATCH = "preference_match"
ANY_AVAILABLE = "any_available"


@dataclass
class SeatCandidate:
    seat: Seat
    room: Room
    block: Block
    strategy: str


class PlacementPolicy:

    async def choose_seat(
        self,
        db: AsyncSession,
        team_size: int,
        preferred_block_name: Optional[str] = None,
        exclude_seat_ids: Collection[int] = (),
    ) -> Optional[SeatCandidate]:
        """
        Return the next candidate seat, or None when nothing is eligible.

        With a preferred block the search is first confined to that block,
        then repeated across all blocks.
        """
        if preferred_block_name:
            candidate = await self._best_in_scope(db, team_size, preferred_block_name, exclude_seat_ids)
            if candidate:
                return candidate

        return await self._best_in_scope(db, team_size, None, exclude_seat_ids)

    async def _best_in_scope(self, db, team_size, block_name, exclude_seat_ids) -> Optional[SeatCandidate]:
        candidate = await self._first_eligible(db, block_name, exclude_seat_ids, team_size=team_size)
        if candidate:
            return candidate
        return await self._first_eligible(db, block_name, exclude_seat_ids)

    async def _first_eligible(
        self,
        db: AsyncSession,
        block_name: Optional[str],
        exclude_seat_ids: Collection[int],
        team_size: Optional[int] = None,
    ) -> Optional[SeatCandidate]:
        query = (
            select(Seat, Room, Block)
            .join(Room, Room.id == Seat.room_id)
            .join(Block, Block.id == Room.block_id)
            .where(
                Seat.is_available == True,
                Seat.is_active == True,
                Room.is_active == True,
                Block.is_active == True,
                Block.city == settings.SUPPORTED_CITY,
            )
        )

        if block_name:
            query = query.where(Block.name == block_name)
        if exclude_seat_ids:
            query = query.where(Seat.id.not_in(list(exclude_seat_ids)))
        if team_size is not None:
            query = query.where(Seat.team_size_preference == team_size)

        query = query.order_by(
            Block.display_order.asc(),
            Room.display_order.asc(),
            Seat.row_number.asc(),
            Seat.column_number.asc(),
            Seat.id.asc(),
        ).limit(1)

        row = (await db.execute(query)).first()
        if row is None:
            return None

        seat, room, block = row
        strategy = PREFERENCE_MATCH if team_size is not None else ANY_AVAILABLE
        return SeatCandidate(seat=seat, room=room, block=block, strategy=strategy)

"""
Team size lookup - the check-in desk's contract with the allocation core
"""
from typing import Protocol
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocation.models import ParticipantCheckIn


class TeamSizeProvider(Protocol):
    async def team_size(self, db: AsyncSession, team_id: UUID) -> int:
        """Number of checked-in participants; 0 (not an error) when none"""
        ...


class CheckInTeamSizeProvider:
    """Counts participant check-in rows, inside the caller's transaction"""

    async def team_size(self, db: AsyncSession, team_id: UUID) -> int:
        count = await db.scalar(
            select(func.count(ParticipantCheckIn.id))
            .where(ParticipantCheckIn.team_id == team_id)
        )
        return count or 0

"""
Seat Allocation Service - allocates one seat per team under concurrent volunteers

The availability bit on `seats` is flipped with a conditional UPDATE
(`... WHERE id = :id AND is_available = true`). That compare-and-swap is the
only guard against two volunteers seating different teams on the same seat;
the UNIQUE constraint on `seat_allocations.team_id` guards the team side.
"""
import logging
import time
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocation.core.config import settings
from seat_allocation.core.metrics import (
    record_allocation_outcome,
    seat_allocation_duration_seconds,
    seat_claim_conflicts_total,
    seat_releases_total,
    update_room_occupancy_gauge,
)
from seat_allocation.models import Room, SeatAllocation
from seat_allocation.services.allocation_store import AllocationStore
from seat_allocation.services.placement_policy import PlacementPolicy, SeatCandidate
from seat_allocation.services.team_size import CheckInTeamSizeProvider, TeamSizeProvider

logger = logging.getLogger(__name__)


class SeatAllocationError(Exception):
    """Base exception for seat allocation errors"""
    outcome = "error"
    http_status = 400
    retryable = False


class AlreadyAllocatedError(SeatAllocationError):
    """Raised when the team already has a seat"""
    outcome = "already_allocated"
    http_status = 409


class NoParticipantsError(SeatAllocationError):
    """Raised when no participant of the team has checked in"""
    outcome = "no_participants"
    http_status = 422


class NoAvailableSeatsError(SeatAllocationError):
    """Raised when neither placement strategy finds a seat"""
    outcome = "no_seats"
    http_status = 409


class SeatRaceLostError(SeatAllocationError):
    """Raised when other volunteers kept claiming the candidate seats first"""
    outcome = "race_lost"
    http_status = 409
    retryable = True


class AllocationNotFoundError(SeatAllocationError):
    """Raised when releasing a team that has no seat"""
    outcome = "not_found"
    http_status = 404


class SeatAllocationService:
    """
    Orchestrates size lookup -> placement -> claim -> occupancy -> record.

    Each public method opens its own transaction with `db.begin()`, so the
    session passed in must not already be inside one.
    """

    def __init__(
        self,
        team_sizes: Optional[TeamSizeProvider] = None,
        policy: Optional[PlacementPolicy] = None,
        claim_attempts: Optional[int] = None,
    ):
        if claim_attempts is not None and claim_attempts < 1:
            raise ValueError("claim_attempts must be >= 1")

        self.team_sizes = team_sizes or CheckInTeamSizeProvider()
        self.policy = policy or PlacementPolicy()
        self.claim_attempts = claim_attempts

    @property
    def max_claim_attempts(self) -> int:
        if self.claim_attempts is not None:
            return self.claim_attempts
        return settings.SEAT_CLAIM_ATTEMPTS

    async def allocate_seat(
        self,
        db: AsyncSession,
        team_id: UUID,
        volunteer_id: UUID,
        preferred_block_name: Optional[str] = None,
    ) -> SeatAllocation:
        """
        Seat a team. All-or-nothing: on any error the seat stays available,
        occupancy is unchanged and no record exists.

        Raises:
            AlreadyAllocatedError, NoParticipantsError, NoAvailableSeatsError,
            SeatRaceLostError; infrastructure errors propagate as-is.
        """
        log_extra = {"team_id": team_id, "volunteer_id": volunteer_id}
        start_time = time.time()

        try:
            async with db.begin():
                allocation = await self._allocate(db, team_id, volunteer_id, preferred_block_name)
        except IntegrityError as e:
            if not await self._team_is_seated(db, team_id):
                record_allocation_outcome("error")
                logger.error(f"Seat allocation failed: {e}", extra=log_extra)
                raise
            # Concurrent allocation for the same team won the unique index
            record_allocation_outcome(AlreadyAllocatedError.outcome)
            logger.warning(f"Team {team_id} was seated concurrently", extra=log_extra)
            raise AlreadyAllocatedError(f"Team {team_id} already has a seat allocated") from e
        except SeatAllocationError as e:
            record_allocation_outcome(e.outcome)
            logger.warning(f"Seat allocation rejected: {e}", extra=log_extra)
            raise
        except Exception as e:
            record_allocation_outcome("error")
            logger.error(f"Seat allocation failed: {e}", extra=log_extra)
            raise
        finally:
            seat_allocation_duration_seconds.observe(time.time() - start_time)

        record_allocation_outcome("allocated")
        logger.info(
            f"Allocated {allocation.location_label} to team {team_id}",
            extra={
                **log_extra,
                "seat_id": allocation.seat_id,
                "room_id": allocation.room_id,
                "team_size": allocation.team_size,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return allocation

    async def _team_is_seated(self, db: AsyncSession, team_id: UUID) -> bool:
        """Fresh lookup after a failed transaction; leaves the session idle"""
        try:
            return await AllocationStore.find_by_team(db, team_id) is not None
        finally:
            await db.rollback()

    async def _allocate(self, db, team_id, volunteer_id, preferred_block_name) -> SeatAllocation:
        # 1. One allocation per team
        if await AllocationStore.find_by_team(db, team_id):
            raise AlreadyAllocatedError(f"Team {team_id} already has a seat allocated")

        # 2. Team size from check-ins
        team_size = await self.team_sizes.team_size(db, team_id)
        if team_size <= 0:
            raise NoParticipantsError(f"No participants of team {team_id} have checked in")

        # 3 + 4. Pick a candidate and claim it
        candidate = await self._claim_candidate(db, team_id, team_size, preferred_block_name)

        # 5. Denormalized occupancy counter
        await AllocationStore.adjust_room_occupancy(db, candidate.room.id, team_size)

        # 6. Record with the names as they are now
        allocation = SeatAllocation(
            team_id=team_id,
            seat_id=candidate.seat.id,
            block_id=candidate.block.id,
            room_id=candidate.room.id,
            allocated_by=volunteer_id,
            team_size=team_size,
            block_name=candidate.block.name,
            room_name=candidate.room.name,
            seat_label=candidate.seat.seat_label,
        )
        return await AllocationStore.insert_record(db, allocation)

    async def _claim_candidate(self, db, team_id, team_size, preferred_block_name) -> SeatCandidate:
        lost_seat_ids: List[int] = []

        while len(lost_seat_ids) < self.max_claim_attempts:
            candidate = await self.policy.choose_seat(
                db,
                team_size,
                preferred_block_name=preferred_block_name,
                exclude_seat_ids=lost_seat_ids,
            )
            if candidate is None:
                raise NoAvailableSeatsError(f"No available seats for a team of {team_size}")

            if await AllocationStore.claim_seat(db, candidate.seat.id):
                logger.debug(
                    f"Claimed seat {candidate.seat.seat_label} via {candidate.strategy}",
                    extra={"team_id": team_id, "seat_id": candidate.seat.id},
                )
                return candidate

            seat_claim_conflicts_total.inc()
            logger.warning(
                f"Seat {candidate.seat.seat_label} was just allocated by another volunteer",
                extra={"team_id": team_id, "seat_id": candidate.seat.id},
            )
            lost_seat_ids.append(candidate.seat.id)

        raise SeatRaceLostError(
            "Seat was just allocated by another volunteer, please try again"
        )

    async def release_seat(self, db: AsyncSession, team_id: UUID) -> SeatAllocation:
        """
        Undo an allocation: delete the record, make the seat available again
        and take the team's size off the room's occupancy, in one transaction.
        """
        async with db.begin():
            allocation = await AllocationStore.find_by_team(db, team_id)
            if allocation is None:
                raise AllocationNotFoundError(f"Team {team_id} has no seat allocated")

            if not await AllocationStore.delete_record(db, allocation.id):
                raise AllocationNotFoundError(f"Allocation for team {team_id} was already released")

            await AllocationStore.free_seat(db, allocation.seat_id)
            await AllocationStore.adjust_room_occupancy(db, allocation.room_id, -allocation.team_size)

        seat_releases_total.inc()
        logger.info(
            f"Released {allocation.location_label} from team {team_id}",
            extra={"team_id": team_id, "seat_id": allocation.seat_id, "room_id": allocation.room_id},
        )
        return allocation

    async def recompute_room_occupancy(self, db: AsyncSession) -> Dict[int, int]:
        """
        Rebuild every room's occupancy counter from the allocation records.

        Returns {room_id: corrected_value} for the rooms that had drifted.
        """
        corrected: Dict[int, int] = {}

        async with db.begin():
            expected = await AllocationStore.occupancy_by_room(db)
            rooms = (await db.execute(select(Room.id, Room.current_occupancy))).all()

            for room_id, occupancy in rooms:
                target = expected.get(room_id, 0)
                if occupancy != target:
                    await db.execute(
                        update(Room)
                        .where(Room.id == room_id)
                        .values(current_occupancy=target)
                        .execution_options(synchronize_session=False)
                    )
                    corrected[room_id] = target
                update_room_occupancy_gauge(room_id, target)

        if corrected:
            logger.warning(f"Corrected occupancy drift in {len(corrected)} room(s): {corrected}")
        return corrected

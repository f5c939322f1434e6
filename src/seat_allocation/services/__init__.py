"""
Services package exports
"""
from seat_allocation.services.allocation_service import (
    SeatAllocationService,
    SeatAllocationError,
    AlreadyAllocatedError,
    NoParticipantsError,
    NoAvailableSeatsError,
    SeatRaceLostError,
    AllocationNotFoundError,
)
from seat_allocation.services.allocation_store import AllocationStore
from seat_allocation.services.catalog_service import (
    SeatCatalogService,
    CatalogError,
    CatalogNotFoundError,
    CatalogValidationError,
)
from seat_allocation.services.placement_policy import PlacementPolicy, SeatCandidate
from seat_allocation.services.query_service import AllocationQueryService
from seat_allocation.services.team_size import CheckInTeamSizeProvider, TeamSizeProvider

__all__ = [
    "SeatAllocationService",
    "SeatAllocationError",
    "AlreadyAllocatedError",
    "NoParticipantsError",
    "NoAvailableSeatsError",
    "SeatRaceLostError",
    "AllocationNotFoundError",
    "AllocationStore",
    "SeatCatalogService",
    "CatalogError",
    "CatalogNotFoundError",
    "CatalogValidationError",
    "PlacementPolicy",
    "SeatCandidate",
    "AllocationQueryService",
    "CheckInTeamSizeProvider",
    "TeamSizeProvider",
]

"""
Seat catalog service - admin CRUD for the Block -> Room -> Seat hierarchy
"""
import string
from typing import Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy import select, func, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from seat_allocation.core.config import settings
from seat_allocation.core.metrics import seat_grids_generated_total
from seat_allocation.models import Block, Room, Seat
from seat_allocation.schemas import (
    BlockCreate,
    BlockUpdate,
    RoomCreate,
    SeatGridCreate,
    SeatPreferenceUpdate,
)
import logging

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

ROW_LETTERS = string.ascii_uppercase


class CatalogError(Exception):
    """Base exception for catalog errors"""
    http_status = 400


class CatalogNotFoundError(CatalogError):
    """Raised when a block or room doesn't exist"""
    http_status = 404


class CatalogValidationError(CatalogError):
    """Raised when input fails validation before persistence"""
    http_status = 422

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []


def _validate(schema: Type[SchemaT], data: Union[SchemaT, dict]) -> SchemaT:
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise CatalogValidationError(f"Invalid {schema.__name__}: {e.error_count()} error(s)", e.errors()) from e


def row_label(row_number: int) -> str:
    """1 -> 'A' ... 26 -> 'Z', then 'Row27', 'Row28', ..."""
    if 1 <= row_number <= len(ROW_LETTERS):
        return ROW_LETTERS[row_number - 1]
    return f"Row{row_number}"


def seat_label(row_number: int, column_number: int) -> str:
    return f"{row_label(row_number)}{column_number}"


class SeatCatalogService:
    """Service for managing blocks, rooms and seat grids"""

    # ==================== Blocks ====================

    @staticmethod
    async def create_block(db: AsyncSession, data: Union[BlockCreate, dict]) -> Block:
        """Create a block at the end of the display order, in the supported city"""
        data = _validate(BlockCreate, data)

        async with db.begin():
            max_order = await db.scalar(
                select(func.coalesce(func.max(Block.display_order), 0))
            )
            block = Block(
                name=data.name,
                city=settings.SUPPORTED_CITY,
                display_order=max_order + 1,
                is_active=True,
            )
            db.add(block)

        logger.info(f"Created block '{block.name}' (order {block.display_order})", extra={"block_id": block.id})
        return block

    @staticmethod
    async def update_block(db: AsyncSession, block_id: int, data: Union[BlockUpdate, dict]) -> Block:
        data = _validate(BlockUpdate, data)

        async with db.begin():
            block = await db.get(Block, block_id)
            if not block:
                raise CatalogNotFoundError(f"Block {block_id} not found")

            for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(block, field, value)

        return block

    @staticmethod
    async def deactivate_block(db: AsyncSession, block_id: int) -> None:
        """Soft delete; rooms and seats of the block stop being placement candidates"""
        async with db.begin():
            result = await db.execute(
                update(Block)
                .where(Block.id == block_id)
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise CatalogNotFoundError(f"Block {block_id} not found")

        logger.info(f"Deactivated block {block_id}", extra={"block_id": block_id})

    @staticmethod
    async def list_blocks(db: AsyncSession) -> List[Block]:
        result = await db.execute(
            select(Block)
            .where(Block.is_active == True)
            .order_by(Block.display_order.asc(), Block.id.asc())
        )
        return list(result.scalars().all())

    # ==================== Rooms ====================

    @staticmethod
    async def create_room(db: AsyncSession, data: Union[RoomCreate, dict]) -> Room:
        """Create a room at the end of its block's display order"""
        data = _validate(RoomCreate, data)

        async with db.begin():
            block = await db.get(Block, data.block_id)
            if not block:
                raise CatalogNotFoundError(f"Block {data.block_id} not found")

            max_order = await db.scalar(
                select(func.coalesce(func.max(Room.display_order), 0))
                .where(Room.block_id == data.block_id)
            )
            room = Room(
                block_id=data.block_id,
                name=data.name,
                capacity=data.capacity,
                current_occupancy=0,
                display_order=max_order + 1,
                is_active=True,
            )
            db.add(room)

        logger.info(f"Created room '{room.name}' in block {room.block_id}", extra={"room_id": room.id})
        return room

    @staticmethod
    async def set_room_active(db: AsyncSession, room_id: int, is_active: bool) -> None:
        async with db.begin():
            result = await db.execute(
                update(Room)
                .where(Room.id == room_id)
                .values(is_active=is_active)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise CatalogNotFoundError(f"Room {room_id} not found")

    @staticmethod
    async def list_rooms(db: AsyncSession, block_id: int) -> List[Room]:
        result = await db.execute(
            select(Room)
            .where(Room.block_id == block_id, Room.is_active == True)
            .order_by(Room.display_order.asc(), Room.id.asc())
        )
        return list(result.scalars().all())

    # ==================== Seats ====================

    @staticmethod
    async def generate_seat_grid(db: AsyncSession, room_id: int, rows: int, cols: int) -> int:
        """
        Replace every seat in the room with a fresh rows x cols grid.

        Existing seats are deleted unconditionally, including allocated ones;
        their allocation records are left pointing at seat ids that no longer
        exist. Room capacity becomes rows * cols.

        Returns the number of seats created.
        """
        data = _validate(SeatGridCreate, {"room_id": room_id, "rows": rows, "cols": cols})

        async with db.begin():
            room = await db.get(Room, data.room_id)
            if not room:
                raise CatalogNotFoundError(f"Room {data.room_id} not found")

            allocated = await db.scalar(
                select(func.count(Seat.id))
                .where(Seat.room_id == room.id, Seat.is_available == False)
            )
            if allocated:
                logger.warning(
                    f"Regenerating grid for room '{room.name}' discards {allocated} allocated seat(s)",
                    extra={"room_id": room.id},
                )

            await db.execute(
                delete(Seat)
                .where(Seat.room_id == room.id)
                .execution_options(synchronize_session=False)
            )

            seats = [
                Seat(
                    room_id=room.id,
                    row_number=row,
                    column_number=col,
                    seat_label=seat_label(row, col),
                    team_size_preference=None,
                    is_available=True,
                    is_active=True,
                )
                for row in range(1, data.rows + 1)
                for col in range(1, data.cols + 1)
            ]

            batch_size = settings.SEAT_INSERT_BATCH_SIZE
            for start in range(0, len(seats), batch_size):
                db.add_all(seats[start:start + batch_size])
                await db.flush()

            room.capacity = data.rows * data.cols

        seat_grids_generated_total.inc()
        logger.info(
            f"Created {len(seats)} seats for room '{room.name}' ({data.rows}x{data.cols})",
            extra={"room_id": room.id},
        )
        return len(seats)

    @staticmethod
    async def set_seat_size_preference(
        db: AsyncSession,
        seat_ids: Iterable[int],
        team_size: Optional[int],
    ) -> int:
        """Tag seats for teams of exactly `team_size`, or clear the tag with None"""
        data = _validate(SeatPreferenceUpdate, {"seat_ids": list(seat_ids), "team_size": team_size})

        async with db.begin():
            result = await db.execute(
                update(Seat)
                .where(Seat.id.in_(data.seat_ids))
                .values(team_size_preference=data.team_size)
                .execution_options(synchronize_session=False)
            )

        return result.rowcount

    @staticmethod
    async def list_seats(db: AsyncSession, room_id: int) -> List[Seat]:
        result = await db.execute(
            select(Seat)
            .where(Seat.room_id == room_id, Seat.is_active == True)
            .order_by(Seat.row_number.asc(), Seat.column_number.asc())
        )
        return list(result.scalars().all())

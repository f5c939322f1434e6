"""
Seed script to populate the database with a sample venue

Usage:
    python -m seat_allocation.scripts.seed_data
"""
import asyncio
import logging

from sqlalchemy import select

from seat_allocation.core.database import AsyncSessionLocal, engine, init_db
from seat_allocation.core.logging_config import setup_logging
from seat_allocation.models import Block, Room, Seat
from seat_allocation.services import SeatCatalogService

logger = logging.getLogger(__name__)

# block name -> [(room name, rows, cols, {team_size: number of leading rows tagged})]
SAMPLE_VENUE = {
    "Main Block": [
        ("Seminar Hall", 6, 8, {4: 2, 3: 2}),
        ("Lab 101", 4, 6, {2: 2}),
    ],
    "Innovation Block": [
        ("Robotics Lab", 5, 5, {4: 1}),
        ("Design Studio", 3, 4, {}),
    ],
}


async def get_or_create_block(name: str) -> Block:
    async with AsyncSessionLocal() as db:
        existing = await db.scalar(select(Block).where(Block.name == name))
    if existing:
        logger.info(f"Block '{name}' already exists, skipping...")
        return existing

    async with AsyncSessionLocal() as db:
        return await SeatCatalogService.create_block(db, {"name": name})


async def seed_room(block: Block, name: str, rows: int, cols: int, tagged_rows: dict) -> None:
    async with AsyncSessionLocal() as db:
        existing = await db.scalar(
            select(Room).where(Room.block_id == block.id, Room.name == name)
        )
    if existing:
        logger.info(f"Room '{name}' already exists, skipping...")
        return

    async with AsyncSessionLocal() as db:
        room = await SeatCatalogService.create_room(db, {"block_id": block.id, "name": name})

    async with AsyncSessionLocal() as db:
        await SeatCatalogService.generate_seat_grid(db, room.id, rows, cols)

    # Tag consecutive leading rows for each team size
    first_row = 1
    for team_size, row_count in tagged_rows.items():
        tagged = range(first_row, first_row + row_count)
        async with AsyncSessionLocal() as db:
            seat_ids = (await db.execute(
                select(Seat.id).where(Seat.room_id == room.id, Seat.row_number.in_(tagged))
            )).scalars().all()
        if seat_ids:
            async with AsyncSessionLocal() as db:
                await SeatCatalogService.set_seat_size_preference(db, seat_ids, team_size)
        first_row += row_count

    logger.info(f"Seeded room '{name}' with {rows * cols} seats")


async def main():
    setup_logging()
    logger.info("Initializing database...")
    await init_db()

    for block_name, rooms in SAMPLE_VENUE.items():
        block = await get_or_create_block(block_name)
        for room_name, rows, cols, tagged_rows in rooms:
            await seed_room(block, room_name, rows, cols, tagged_rows)

    await engine.dispose()
    logger.info("Seeding complete")


if __name__ == "__main__":
    asyncio.run(main())

import uuid

import pytest
import pytest_asyncio
from sqlalchemy import select

from seat_allocation.core.database import build_engine, build_session_factory, drop_db, init_db
from seat_allocation.models import ParticipantCheckIn, Room, Seat
from seat_allocation.services import SeatAllocationService, SeatCatalogService


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh SQLite database file for each test"""
    test_engine = build_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'seats.db'}",
        connect_args={"timeout": 30},
    )
    await init_db(test_engine)

    yield test_engine

    await drop_db(test_engine)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def volunteer_id():
    return uuid.uuid4()


@pytest.fixture
def allocator():
    return SeatAllocationService()


class CatalogHelper:
    """Builds venues through the catalog service, one session per call"""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def block(self, name):
        async with self.session_factory() as db:
            return await SeatCatalogService.create_block(db, {"name": name})

    async def room(self, block, name, rows=0, cols=0):
        async with self.session_factory() as db:
            room = await SeatCatalogService.create_room(db, {"block_id": block.id, "name": name})
        if rows and cols:
            await self.grid(room.id, rows, cols)
        return room

    async def grid(self, room_id, rows, cols):
        async with self.session_factory() as db:
            return await SeatCatalogService.generate_seat_grid(db, room_id, rows, cols)

    async def tag(self, seats, team_size):
        async with self.session_factory() as db:
            return await SeatCatalogService.set_seat_size_preference(db, [s.id for s in seats], team_size)

    async def seats(self, room_id):
        async with self.session_factory() as db:
            result = await db.execute(
                select(Seat).where(Seat.room_id == room_id).order_by(Seat.row_number, Seat.column_number)
            )
            return list(result.scalars().all())

    async def seat(self, room_id, label):
        async with self.session_factory() as db:
            return await db.scalar(
                select(Seat).where(Seat.room_id == room_id, Seat.seat_label == label)
            )

    async def fresh_room(self, room_id):
        async with self.session_factory() as db:
            return await db.get(Room, room_id)


@pytest.fixture
def catalog(session_factory):
    return CatalogHelper(session_factory)


@pytest.fixture
def new_team(session_factory):
    """Create a team id with `size` checked-in participants"""
    async def _new_team(size):
        team_id = uuid.uuid4()
        if size:
            async with session_factory() as db:
                db.add_all([
                    ParticipantCheckIn(
                        team_id=team_id,
                        participant_name=f"Participant {i + 1}",
                        participant_role="leader" if i == 0 else "member",
                    )
                    for i in range(size)
                ])
                await db.commit()
        return team_id
    return _new_team


@pytest.fixture
def allocate(session_factory, allocator, volunteer_id):
    """Allocate in a fresh session, like one volunteer request"""
    async def _allocate(team_id, service=None, **kwargs):
        async with session_factory() as db:
            return await (service or allocator).allocate_seat(db, team_id, volunteer_id, **kwargs)
    return _allocate

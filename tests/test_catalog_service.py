import pytest
from sqlalchemy import select, update

from seat_allocation.core.config import settings
from seat_allocation.models import Block, Seat
from seat_allocation.schemas import BlockResponse, RoomResponse, SeatResponse
from seat_allocation.services import (
    SeatCatalogService,
    CatalogNotFoundError,
    CatalogValidationError,
)
from seat_allocation.services.catalog_service import row_label, seat_label


@pytest.mark.asyncio
async def test_create_block_assigns_next_display_order_and_city(catalog):
    """Blocks are appended to the display order in the configured city"""
    first = await catalog.block("Main Block")
    second = await catalog.block("Innovation Block")

    assert first.display_order == 1
    assert second.display_order == 2
    assert first.city == settings.SUPPORTED_CITY
    assert first.is_active is True


@pytest.mark.asyncio
async def test_create_block_uses_configured_city(catalog, monkeypatch):
    monkeypatch.setattr(settings, "SUPPORTED_CITY", "pune")

    block = await catalog.block("Annex")

    assert block.city == "pune"


@pytest.mark.asyncio
async def test_create_block_rejects_blank_name(session_factory):
    async with session_factory() as db:
        with pytest.raises(CatalogValidationError):
            await SeatCatalogService.create_block(db, {"name": "   "})

    async with session_factory() as db:
        assert await SeatCatalogService.list_blocks(db) == []


@pytest.mark.asyncio
async def test_create_block_requires_name(session_factory):
    async with session_factory() as db:
        with pytest.raises(CatalogValidationError) as exc_info:
            await SeatCatalogService.create_block(db, {})

    assert exc_info.value.errors
    assert exc_info.value.http_status == 422


@pytest.mark.asyncio
async def test_room_display_order_is_scoped_to_block(catalog):
    main = await catalog.block("Main Block")
    annex = await catalog.block("Annex")

    r1 = await catalog.room(main, "Lab 1")
    r2 = await catalog.room(main, "Lab 2")
    a1 = await catalog.room(annex, "Hall")

    assert (r1.display_order, r2.display_order) == (1, 2)
    assert a1.display_order == 1
    assert r1.current_occupancy == 0


@pytest.mark.asyncio
async def test_create_room_for_missing_block(session_factory):
    async with session_factory() as db:
        with pytest.raises(CatalogNotFoundError):
            await SeatCatalogService.create_room(db, {"block_id": 999, "name": "Ghost"})


@pytest.mark.asyncio
async def test_generate_seat_grid_labels_and_capacity(catalog):
    """3 x 2 grid gives A1, A2, B1, B2, C1, C2 and capacity 6"""
    block = await catalog.block("Main Block")
    room = await catalog.room(block, "R1")

    created = await catalog.grid(room.id, 3, 2)
    seats = await catalog.seats(room.id)

    assert created == 6
    assert [s.seat_label for s in seats] == ["A1", "A2", "B1", "B2", "C1", "C2"]
    assert [s.grid_position for s in seats[:3]] == [(1, 1), (1, 2), (2, 1)]
    assert all(s.is_available and s.is_active for s in seats)
    assert all(s.team_size_preference is None for s in seats)

    room = await catalog.fresh_room(room.id)
    assert room.capacity == 6


@pytest.mark.asyncio
async def test_generate_seat_grid_replaces_existing_seats(catalog):
    block = await catalog.block("Main Block")
    room = await catalog.room(block, "R1")

    await catalog.grid(room.id, 3, 2)
    await catalog.grid(room.id, 2, 3)
    seats = await catalog.seats(room.id)

    assert len(seats) == 6
    assert [s.seat_label for s in seats] == ["A1", "A2", "A3", "B1", "B2", "B3"]


@pytest.mark.asyncio
async def test_generate_seat_grid_only_touches_its_room(catalog):
    block = await catalog.block("Main Block")
    lab = await catalog.room(block, "Lab", 2, 2)
    hall = await catalog.room(block, "Hall", 1, 1)

    await catalog.grid(lab.id, 1, 3)

    assert len(await catalog.seats(lab.id)) == 3
    assert len(await catalog.seats(hall.id)) == 1


@pytest.mark.asyncio
async def test_generate_seat_grid_validation(catalog, session_factory):
    block = await catalog.block("Main Block")
    room = await catalog.room(block, "R1")

    async with session_factory() as db:
        with pytest.raises(CatalogValidationError):
            await SeatCatalogService.generate_seat_grid(db, room.id, 0, 4)

    async with session_factory() as db:
        with pytest.raises(CatalogNotFoundError):
            await SeatCatalogService.generate_seat_grid(db, 12345, 2, 2)


def test_row_labels_overflow_past_z():
    assert row_label(1) == "A"
    assert row_label(26) == "Z"
    assert row_label(27) == "Row27"
    assert seat_label(3, 4) == "C4"
    assert seat_label(27, 1) == "Row271"


@pytest.mark.asyncio
async def test_large_grid_is_inserted_in_batches(catalog, monkeypatch):
    monkeypatch.setattr(settings, "SEAT_INSERT_BATCH_SIZE", 7)
    block = await catalog.block("Main Block")
    room = await catalog.room(block, "Auditorium")

    created = await catalog.grid(room.id, 28, 2)
    seats = await catalog.seats(room.id)

    assert created == 56
    assert seats[-1].seat_label == "Row282"


@pytest.mark.asyncio
async def test_set_and_clear_seat_size_preference(catalog):
    block = await catalog.block("Main Block")
    room = await catalog.room(block, "R1", 1, 3)
    seats = await catalog.seats(room.id)

    updated = await catalog.tag(seats[:2], 4)
    tagged = await catalog.seats(room.id)

    assert updated == 2
    assert [s.team_size_preference for s in tagged] == [4, 4, None]

    await catalog.tag(seats[:1], None)
    cleared = await catalog.seats(room.id)
    assert [s.team_size_preference for s in cleared] == [None, 4, None]


@pytest.mark.asyncio
async def test_set_seat_size_preference_rejects_bad_input(session_factory):
    async with session_factory() as db:
        with pytest.raises(CatalogValidationError):
            await SeatCatalogService.set_seat_size_preference(db, [], 2)

    async with session_factory() as db:
        with pytest.raises(CatalogValidationError):
            await SeatCatalogService.set_seat_size_preference(db, [1], 0)


@pytest.mark.asyncio
async def test_listing_orders_and_filters_inactive(catalog, session_factory):
    main = await catalog.block("Main Block")
    annex = await catalog.block("Annex")
    old = await catalog.block("Old Wing")
    lab = await catalog.room(main, "Lab", 2, 2)
    hall = await catalog.room(main, "Hall")

    async with session_factory() as db:
        await SeatCatalogService.deactivate_block(db, old.id)
    async with session_factory() as db:
        await SeatCatalogService.update_block(db, annex.id, {"display_order": 5})
    async with session_factory() as db:
        await SeatCatalogService.set_room_active(db, hall.id, False)
    async with session_factory() as db:
        await db.execute(
            update(Seat).where(Seat.seat_label == "A2").values(is_active=False)
        )
        await db.commit()

    async with session_factory() as db:
        blocks = await SeatCatalogService.list_blocks(db)
        rooms = await SeatCatalogService.list_rooms(db, main.id)
        seats = await SeatCatalogService.list_seats(db, lab.id)

    assert [b.name for b in blocks] == ["Main Block", "Annex"]
    assert [r.name for r in rooms] == ["Lab"]
    assert [s.seat_label for s in seats] == ["A1", "B1", "B2"]


@pytest.mark.asyncio
async def test_update_block_partial(catalog, session_factory):
    block = await catalog.block("Main Block")

    async with session_factory() as db:
        updated = await SeatCatalogService.update_block(db, block.id, {"name": "North Block"})

    assert updated.name == "North Block"
    assert updated.display_order == 1

    async with session_factory() as db:
        stored = await db.scalar(select(Block).where(Block.id == block.id))
    assert stored.name == "North Block"
    assert stored.is_active is True


@pytest.mark.asyncio
async def test_update_and_deactivate_missing_block(session_factory):
    async with session_factory() as db:
        with pytest.raises(CatalogNotFoundError):
            await SeatCatalogService.update_block(db, 42, {"name": "X"})

    async with session_factory() as db:
        with pytest.raises(CatalogNotFoundError):
            await SeatCatalogService.deactivate_block(db, 42)


@pytest.mark.asyncio
async def test_catalog_read_models(catalog, new_team, allocate, session_factory):
    block = await catalog.block("Main Block")
    room = await catalog.room(block, "Lab", 2, 2)
    await catalog.tag([await catalog.seat(room.id, "B2")], 3)
    await allocate(await new_team(3))

    async with session_factory() as db:
        blocks = [BlockResponse.model_validate(b) for b in await SeatCatalogService.list_blocks(db)]
        rooms = [RoomResponse.model_validate(r) for r in await SeatCatalogService.list_rooms(db, block.id)]
        seats = [SeatResponse.model_validate(s) for s in await SeatCatalogService.list_seats(db, room.id)]

    assert blocks[0].name == "Main Block"
    assert (rooms[0].capacity, rooms[0].current_occupancy) == (4, 3)
    assert seats[3].seat_label == "B2"
    assert seats[3].team_size_preference == 3
    assert seats[3].is_available is False

    assert (await catalog.fresh_room(room.id)).utilization == 75.0

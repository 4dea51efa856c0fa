"""
Hotel and room catalog reads, plus the optimistic room claim used by the
booking engine.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_booking.models.hotel import Hotel, Room


async def find_room_by_id(db: AsyncSession, room_id: int) -> Optional[Room]:
    # populate_existing: a retry must see the version another transaction committed
    result = await db.execute(
        select(Room)
        .where(Room.id == room_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def claim_room(db: AsyncSession, room_id: int, seen_version: int) -> bool:
    """
    Bump the room's version only if nobody else did since we read it.

    UPDATE rooms SET version = version + 1 WHERE id = :id AND version = :seen

    The updated row stays locked until our transaction ends, so a competing
    writer either waits and then matches zero rows, or claims first and
    makes us match zero rows. Returns True when we own the claim.
    """
    result = await db.execute(
        update(Room)
        .where(Room.id == room_id, Room.version == seen_version)
        .values(version=Room.version + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def list_hotels(db: AsyncSession) -> list[Hotel]:
    result = await db.execute(select(Hotel).order_by(Hotel.id))
    return list(result.scalars().all())


async def find_hotel_with_rooms(db: AsyncSession, hotel_id: int) -> Optional[Hotel]:
    result = await db.execute(
        select(Hotel).options(selectinload(Hotel.rooms)).where(Hotel.id == hotel_id)
    )
    return result.scalar_one_or_none()

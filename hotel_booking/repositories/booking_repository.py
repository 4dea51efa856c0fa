"""
Booking store: the four access patterns the booking engine needs.
"""

from typing import Optional

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from hotel_booking.models.booking import Booking


async def find_user_booking(db: AsyncSession, user_id: int) -> Optional[Booking]:
    """The user's booking with its Room loaded, or None."""
    result = await db.execute(
        select(Booking)
        .options(joinedload(Booking.room))
        .where(Booking.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def find_bookings_by_room_id(db: AsyncSession, room_id: int) -> list[Booking]:
    result = await db.execute(
        select(Booking).where(Booking.room_id == room_id).order_by(Booking.id)
    )
    return list(result.scalars().all())


async def count_bookings_by_room_id(db: AsyncSession, room_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(Booking).where(Booking.room_id == room_id)
    )
    return result.scalar_one()


async def count_bookings_by_room_ids(db: AsyncSession, room_ids: list[int]) -> dict[int, int]:
    """Occupancy per room in one query; rooms without bookings are absent."""
    if not room_ids:
        return {}
    result = await db.execute(
        select(Booking.room_id, func.count())
        .where(Booking.room_id.in_(room_ids))
        .group_by(Booking.room_id)
    )
    return {room_id: count for room_id, count in result.all()}


async def create_booking(db: AsyncSession, user_id: int, room_id: int) -> Booking:
    booking = Booking(user_id=user_id, room_id=room_id)
    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    return booking


async def delete_booking(db: AsyncSession, booking_id: int, user_id: int) -> bool:
    """Delete the booking if it still belongs to the user. False if no row matched."""
    result = await db.execute(
        delete(Booking).where(Booking.id == booking_id, Booking.user_id == user_id)
    )
    return result.rowcount == 1

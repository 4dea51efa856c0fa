"""
Booking eligibility engine: who may hold a hotel room, and which room.

ELIGIBILITY
===========
A user may read or write a booking only if:
  1. they have an enrollment                        -> else NotFoundError
  2. the enrollment has a ticket that is PAID, not
     remote, and whose type includes hotel          -> else CannotListBookingError

Writes additionally require the target room to exist (NotFoundError) and to
have a free slot (RoomCapacityError). Creating requires that the user holds
no booking (AlreadyBookedError); replacing requires that the supplied
booking id is the user's current booking (BookingMismatchError).

Checks run in this order and the first failure aborts the request:
room, eligibility, existing booking.

CONCURRENCY STRATEGY: Optimistic room claim inside one transaction
=================================================================

Problem:
  Two users try to take the last slot of a room simultaneously.
  Both count 1 booking in a room of capacity 2, both insert.
  Result: 3 guests in a room for 2.

Solution:
  Every write reads the room, counts its bookings, and then bumps
  rooms.version with

    UPDATE rooms SET version = version + 1
    WHERE id = :room_id AND version = :seen_version

  If rows_affected == 0 someone else wrote into the room since we read it:
  re-read and retry (the recount now sees their booking). Every booking
  insert bumps the version, so an unchanged version means the first count
  still holds. The updated row stays locked until commit, so writers to
  the same room serialize while writers to different rooms never wait on
  each other.

  One booking per user is backed by a unique constraint on
  bookings.user_id; a racing duplicate surfaces as IntegrityError and is
  reported as AlreadyBookedError.

  Replacement deletes the old booking and inserts the new one in the same
  transaction (the session dependency commits or rolls back the request as
  a unit), so the user is never seen with two bookings and a failed insert
  leaves the old booking in place.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.core.config import get_settings
from hotel_booking.core.errors import (
    AlreadyBookedError,
    BookingConflictError,
    BookingMismatchError,
    CannotListBookingError,
    NotFoundError,
    RoomCapacityError,
)
from hotel_booking.core.logging import get_logger
from hotel_booking.core.metrics import record_db_retry
from hotel_booking.models.booking import Booking
from hotel_booking.models.hotel import Room
from hotel_booking.models.ticket import TicketStatus
from hotel_booking.repositories import (
    booking_repository,
    enrollment_repository,
    hotel_repository,
    ticket_repository,
)

logger = get_logger(__name__)
settings = get_settings()

MAX_RETRY_ATTEMPTS = settings.BOOKING_MAX_RETRY_ATTEMPTS


async def assert_bookable(db: AsyncSession, user_id: int) -> None:
    """Raise unless the user has a paid, in-person, hotel-inclusive ticket."""
    enrollment = await enrollment_repository.find_by_user_id(db, user_id)
    if not enrollment:
        raise NotFoundError("Enrollment not found")

    ticket = await ticket_repository.find_ticket_by_enrollment_id(db, enrollment.id)
    if (
        not ticket
        or ticket.status != TicketStatus.PAID
        or ticket.ticket_type.is_remote
        or not ticket.ticket_type.includes_hotel
    ):
        raise CannotListBookingError()


async def assert_room_has_capacity(db: AsyncSession, room_id: int) -> Room:
    room = await hotel_repository.find_room_by_id(db, room_id)
    if not room:
        raise NotFoundError(f"Room {room_id} not found")

    occupied = await booking_repository.count_bookings_by_room_id(db, room_id)
    if occupied >= room.capacity:
        logger.warning(
            "booking_rejected_room_full",
            room_id=room_id,
            capacity=room.capacity,
            occupied=occupied,
        )
        raise RoomCapacityError()
    return room


async def _claim_room_slot(db: AsyncSession, room: Room) -> None:
    """
    Take the room's optimistic lock at the version its capacity was checked at.
    On a version conflict, re-read and recheck the room, up to MAX_RETRY_ATTEMPTS.
    """
    room_id = room.id
    for attempt in range(1, MAX_RETRY_ATTEMPTS + 1):
        if attempt > 1:
            room = await assert_room_has_capacity(db, room_id)

        if await hotel_repository.claim_room(db, room_id, room.version):
            return

        record_db_retry()
        logger.info(
            "booking_retry",
            room_id=room_id,
            attempt=attempt,
            reason="version_conflict",
        )

    raise BookingConflictError()


def _is_duplicate_user_booking(error: IntegrityError) -> bool:
    # PostgreSQL names the constraint; SQLite names the column
    detail = str(error.orig)
    return "uq_booking_user" in detail or "bookings.user_id" in detail


async def _insert_booking(db: AsyncSession, user_id: int, room_id: int) -> Booking:
    try:
        return await booking_repository.create_booking(db, user_id, room_id)
    except IntegrityError as e:
        if not _is_duplicate_user_booking(e):
            raise
        # A concurrent request booked for this user after our existence check
        logger.warning("booking_rejected_duplicate", user_id=user_id, room_id=room_id)
        raise AlreadyBookedError()


async def get_booking(db: AsyncSession, user_id: int) -> Booking:
    """Current booking of the user, with its Room loaded."""
    await assert_bookable(db, user_id)

    booking = await booking_repository.find_user_booking(db, user_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


async def create_booking(db: AsyncSession, user_id: int, room_id: int) -> Booking:
    room = await assert_room_has_capacity(db, room_id)
    await assert_bookable(db, user_id)

    existing = await booking_repository.find_user_booking(db, user_id)
    if existing:
        raise AlreadyBookedError()

    await _claim_room_slot(db, room)
    booking = await _insert_booking(db, user_id, room_id)

    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user_id,
        room_id=room_id,
    )
    return booking


async def replace_booking(
    db: AsyncSession,
    user_id: int,
    room_id: int,
    booking_id: int,
) -> Booking:
    """
    Move the user's booking `booking_id` into `room_id`.

    The old booking still counts against its room's occupancy until it is
    deleted, so replacing into the same room requires a free slot there.
    """
    room = await assert_room_has_capacity(db, room_id)
    await assert_bookable(db, user_id)

    current = await booking_repository.find_user_booking(db, user_id)
    if not current or current.id != booking_id:
        raise BookingMismatchError()
    previous_room_id = current.room_id

    await _claim_room_slot(db, room)

    if not await booking_repository.delete_booking(db, booking_id, user_id):
        # Replaced by a concurrent request between our read and the delete
        raise BookingMismatchError()
    booking = await _insert_booking(db, user_id, room_id)

    logger.info(
        "booking_replaced",
        booking_id=booking.id,
        previous_booking_id=booking_id,
        user_id=user_id,
        room_id=room_id,
        previous_room_id=previous_room_id,
    )
    return booking

"""
Booking endpoints: view, reserve and change the user's hotel room.

Status mapping:
  GET            404 no enrollment or booking, 402 ticket not eligible
  POST and PUT   403 room full, already booked, wrong booking or not eligible
                 404 room or enrollment missing
                 409 room lock still contended after retries
                 400 anything else
"""

import time

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.db.session import get_db
from hotel_booking.schemas.booking import BookingCreate, BookingResponse, BookingIdResponse
from hotel_booking.services import booking_service
from hotel_booking.core.errors import (
    BookingConflictError,
    CannotListBookingError,
    NotFoundError,
    RoomCapacityError,
)
from hotel_booking.core.metrics import booking_latency, record_booking_attempt
from hotel_booking.core.security import get_current_user_id
from hotel_booking.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/booking", tags=["Bookings"])


def _write_failure(operation: str, error: Exception) -> HTTPException:
    if isinstance(error, (RoomCapacityError, CannotListBookingError)):
        outcome, status_code = "forbidden", status.HTTP_403_FORBIDDEN
    elif isinstance(error, NotFoundError):
        outcome, status_code = "not_found", status.HTTP_404_NOT_FOUND
    elif isinstance(error, BookingConflictError):
        outcome, status_code = "conflict", status.HTTP_409_CONFLICT
    else:
        logger.exception("booking_write_failed", operation=operation)
        outcome, status_code = "error", status.HTTP_400_BAD_REQUEST

    record_booking_attempt(operation, outcome)
    logger.info(
        "booking_rejected",
        operation=operation,
        reason=type(error).__name__,
        status_code=status_code,
    )
    return HTTPException(status_code=status_code, detail=str(error) or None)


@router.get("", response_model=BookingResponse)
async def get_booking(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """The user's current booking with its room."""
    try:
        return await booking_service.get_booking(db, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except CannotListBookingError as e:
        raise HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=e.message)


@router.post("", response_model=BookingIdResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Reserve a room.

    Fails if the room is full, the user already holds a booking, or the
    ticket does not include an in-person stay with hotel.
    """
    started = time.perf_counter()
    try:
        booking = await booking_service.create_booking(db, user_id, booking_data.room_id)
    except Exception as e:
        raise _write_failure("create", e)
    finally:
        booking_latency.labels(operation="create").observe(time.perf_counter() - started)

    record_booking_attempt("create", "success")
    return BookingIdResponse(booking_id=booking.id)


@router.put("/{booking_id}", response_model=BookingIdResponse, status_code=status.HTTP_201_CREATED)
async def replace_booking(
    booking_id: int,
    booking_data: BookingCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Move the user's booking to another room.

    The old booking is deleted and a new one is created, so the response
    carries the new booking id.
    """
    started = time.perf_counter()
    try:
        booking = await booking_service.replace_booking(
            db, user_id, booking_data.room_id, booking_id
        )
    except Exception as e:
        raise _write_failure("replace", e)
    finally:
        booking_latency.labels(operation="replace").observe(time.perf_counter() - started)

    record_booking_attempt("replace", "success")
    return BookingIdResponse(booking_id=booking.id)

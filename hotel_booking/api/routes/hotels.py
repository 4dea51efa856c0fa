"""
Hotel catalog endpoints, open to users whose ticket includes hotel.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.db.session import get_db
from hotel_booking.schemas.hotel import HotelResponse, HotelWithRoomsResponse
from hotel_booking.services import hotel_service
from hotel_booking.core.errors import CannotListBookingError, NotFoundError
from hotel_booking.core.security import get_current_user_id

router = APIRouter(prefix="/hotels", tags=["Hotels"])


@router.get("", response_model=list[HotelResponse])
async def list_hotels_endpoint(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    List all hotels.
    The catalog is cached in Redis; eligibility is checked on every call.
    """
    try:
        return await hotel_service.list_hotels(db, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except CannotListBookingError as e:
        raise HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=e.message)


@router.get("/{hotel_id}", response_model=HotelWithRoomsResponse)
async def get_hotel_endpoint(
    hotel_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """A hotel with its rooms and how many guests each room already holds."""
    try:
        return await hotel_service.get_hotel_with_rooms(db, user_id, hotel_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except CannotListBookingError as e:
        raise HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=e.message)

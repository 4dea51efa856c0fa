"""
Hotel catalog service. Browsing hotels requires the same ticket eligibility
as booking a room in one.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_booking.core.errors import NotFoundError
from hotel_booking.core.logging import get_logger
from hotel_booking.repositories import booking_repository, hotel_repository
from hotel_booking.schemas.hotel import HotelResponse, HotelWithRoomsResponse, RoomAvailability
from hotel_booking.services.booking_service import assert_bookable
from hotel_booking.services.cache_service import get_cached_hotels, set_cached_hotels

logger = get_logger(__name__)


async def list_hotels(db: AsyncSession, user_id: int) -> list[HotelResponse]:
    """
    All hotels. Eligibility is checked on every call; only the catalog
    itself comes from cache.
    """
    await assert_bookable(db, user_id)

    cached = await get_cached_hotels()
    if cached is not None:
        logger.info("hotels_list_cache_hit", count=len(cached))
        return [HotelResponse.model_validate(h) for h in cached]

    hotels = [HotelResponse.model_validate(h) for h in await hotel_repository.list_hotels(db)]
    await set_cached_hotels([h.model_dump(mode="json") for h in hotels])
    return hotels


async def get_hotel_with_rooms(db: AsyncSession, user_id: int, hotel_id: int) -> HotelWithRoomsResponse:
    """A hotel and its rooms with live occupancy. Not cached."""
    await assert_bookable(db, user_id)

    hotel = await hotel_repository.find_hotel_with_rooms(db, hotel_id)
    if not hotel:
        raise NotFoundError(f"Hotel {hotel_id} not found")

    occupancy = await booking_repository.count_bookings_by_room_ids(
        db, [room.id for room in hotel.rooms]
    )
    rooms = [
        RoomAvailability(
            id=room.id,
            name=room.name,
            capacity=room.capacity,
            hotel_id=room.hotel_id,
            booked=occupancy.get(room.id, 0),
            created_at=room.created_at,
            updated_at=room.updated_at,
        )
        for room in hotel.rooms
    ]
    return HotelWithRoomsResponse(
        id=hotel.id,
        name=hotel.name,
        image=hotel.image,
        created_at=hotel.created_at,
        updated_at=hotel.updated_at,
        rooms=rooms,
    )

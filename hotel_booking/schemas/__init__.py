from hotel_booking.schemas.user import UserCreate, UserResponse, UserLogin, Token
from hotel_booking.schemas.booking import (
    BookingCreate, BookingResponse, BookingIdResponse, BookedRoom,
)
from hotel_booking.schemas.hotel import HotelResponse, HotelWithRoomsResponse, RoomAvailability

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token",
    "BookingCreate", "BookingResponse", "BookingIdResponse", "BookedRoom",
    "HotelResponse", "HotelWithRoomsResponse", "RoomAvailability",
]

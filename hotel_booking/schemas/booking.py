"""
Pydantic schemas for booking-related request/response validation.

The wire format is camelCase (`roomId`, `bookingId`, `Room.hotelId`) while
the models are snake_case; aliases bridge the two.
"""

from datetime import datetime
from pydantic import BaseModel, Field


class BookingCreate(BaseModel):
    room_id: int = Field(..., alias="roomId")

    model_config = {"populate_by_name": True}


class BookedRoom(BaseModel):
    id: int
    name: str
    capacity: int
    hotel_id: int = Field(serialization_alias="hotelId")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: int
    room: BookedRoom = Field(serialization_alias="Room")

    model_config = {"from_attributes": True}


class BookingIdResponse(BaseModel):
    booking_id: int = Field(serialization_alias="bookingId")

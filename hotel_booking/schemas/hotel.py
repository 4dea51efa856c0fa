"""
Pydantic schemas for the hotel catalog.
"""

from datetime import datetime
from pydantic import BaseModel, Field


class HotelResponse(BaseModel):
    id: int
    name: str
    image: str
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    model_config = {"from_attributes": True}


class RoomAvailability(BaseModel):
    id: int
    name: str
    capacity: int
    hotel_id: int = Field(serialization_alias="hotelId")
    booked: int
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class HotelWithRoomsResponse(HotelResponse):
    rooms: list[RoomAvailability] = Field(serialization_alias="Rooms")

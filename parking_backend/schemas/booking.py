from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BookingStatus(str, Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class BookingCreate(BaseModel):
    """Fields accepted when a user books a spot.

    Required fields are checked by the route so that a missing one yields the
    same 400 payload as other client errors.
    """

    user_id: Optional[str] = None
    api_parking_id: Optional[str] = None
    api_provider: Optional[str] = None
    parking_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    vehicle_number: Optional[str] = None
    estimated_price: Optional[float] = None


class UserBookings(BaseModel):
    upcoming: List[Dict[str, Any]] = Field(default_factory=list)
    history: List[Dict[str, Any]] = Field(default_factory=list)
    all: List[Dict[str, Any]] = Field(default_factory=list)


class BookingResponse(BaseModel):
    success: bool = True
    booking: Optional[Dict[str, Any]] = None


class UserBookingsResponse(BaseModel):
    success: bool = True
    bookings: UserBookings

from fastapi import APIRouter

from ..exceptions import ParkingAPIError
from ..schemas.booking import BookingCreate, BookingResponse, UserBookingsResponse
from ..services import bookings as booking_service
from ..utils import logger

router = APIRouter(prefix="/api/bookings", tags=["bookings"])

REQUIRED_FIELDS = ("user_id", "api_parking_id", "check_in_time", "check_out_time")


@router.post("/create", response_model=BookingResponse, status_code=201)
async def create_booking(request: BookingCreate):
    missing = [name for name in REQUIRED_FIELDS if not getattr(request, name)]
    if missing:
        logger.error(f"Missing required booking fields: {missing}")
        raise ParkingAPIError(400, "Missing required fields", ", ".join(missing))

    logger.info(f"Creating booking for user_id: {request.user_id}")
    try:
        booking = booking_service.create_booking(request)
    except booking_service.BookingError as e:
        logger.error(f"Create booking error: {e}")
        raise ParkingAPIError(500, str(e)) from e
    return BookingResponse(booking=booking)


@router.get("/user/{user_id}", response_model=UserBookingsResponse)
async def get_user_bookings(user_id: str):
    if not user_id.strip():
        raise ParkingAPIError(400, "User ID required")
    try:
        bookings = booking_service.get_user_bookings(user_id)
    except booking_service.BookingError as e:
        logger.error(f"Get user bookings error: {e}")
        raise ParkingAPIError(500, str(e)) from e
    return UserBookingsResponse(bookings=bookings)


@router.put("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(booking_id: str):
    try:
        booking = booking_service.cancel_booking(booking_id)
    except booking_service.BookingError as e:
        logger.error(f"Cancel booking error: {e}")
        raise ParkingAPIError(500, str(e)) from e
    return BookingResponse(booking=booking)


@router.put("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(booking_id: str):
    try:
        booking = booking_service.complete_booking(booking_id)
    except booking_service.BookingError as e:
        logger.error(f"Complete booking error: {e}")
        raise ParkingAPIError(500, str(e)) from e
    return BookingResponse(booking=booking)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: str):
    try:
        booking = booking_service.get_booking_by_id(booking_id)
    except booking_service.BookingError as e:
        logger.error(f"Get booking error: {e}")
        raise ParkingAPIError(500, str(e)) from e
    return BookingResponse(booking=booking)

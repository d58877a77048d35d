from datetime import datetime, timezone
from typing import Any, Dict, List

from ..config.supabase import get_supabase_client
from ..schemas.booking import BookingCreate, BookingStatus, UserBookings
from ..utils import logger


class BookingError(Exception):
    """Raised when a booking cannot be read or written."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_time(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _ensure_profile(supabase, user_id: str) -> None:
    response = supabase.table("profiles").select("id").eq("id", user_id).limit(1).execute()
    if response.data:
        logger.info(f"✅ User profile found: {user_id}")
        return

    logger.warning(f"⚠️  Profile not found for user {user_id}. Attempting to create profile...")
    try:
        supabase.table("profiles").insert(
            {"id": user_id, "email": f"user-{user_id}@app.local", "provider": "supabase"}
        ).execute()
    except Exception as e:
        raise BookingError(
            f"User profile does not exist and could not be created: {e}"
        ) from e
    logger.info(f"✅ Profile created for {user_id}")


def create_booking(booking: BookingCreate) -> Dict[str, Any]:
    """Insert a confirmed booking for an existing (or freshly created) profile."""
    try:
        supabase = get_supabase_client()
        _ensure_profile(supabase, booking.user_id)

        now = _now().isoformat()
        row = {
            "user_id": booking.user_id,
            "api_parking_id": booking.api_parking_id,
            "api_provider": booking.api_provider or "geoapify",
            "parking_name": booking.parking_name,
            "latitude": booking.latitude,
            "longitude": booking.longitude,
            "address": booking.address,
            "check_in_time": _parse_time(booking.check_in_time).isoformat(),
            "check_out_time": _parse_time(booking.check_out_time).isoformat(),
            "vehicle_number": booking.vehicle_number,
            "estimated_price": booking.estimated_price,
            "status": BookingStatus.confirmed.value,
            "created_at": now,
            "updated_at": now,
        }
        response = supabase.table("bookings").insert(row).execute()
    except BookingError as e:
        raise BookingError(f"Failed to create booking: {e}") from e
    except Exception as e:
        logger.error(f"🚨 Failed to create booking: {e}")
        raise BookingError(f"Failed to create booking: {e}") from e

    if not response.data:
        raise BookingError("Failed to create booking: no data returned from database")
    logger.info(f"✅ Booking inserted successfully: {response.data[0].get('id')}")
    return response.data[0]


def split_bookings(rows: List[Dict[str, Any]], now: datetime) -> UserBookings:
    """Upcoming = future check-in and not cancelled; everything else is history."""
    upcoming, history = [], []
    for row in rows:
        check_in = _parse_time(row["check_in_time"])
        if check_in > now and row.get("status") != BookingStatus.cancelled.value:
            upcoming.append(row)
        else:
            history.append(row)
    return UserBookings(upcoming=upcoming, history=history, all=rows)


def get_user_bookings(user_id: str) -> UserBookings:
    try:
        response = (
            get_supabase_client()
            .table("bookings")
            .select("*")
            .eq("user_id", user_id)
            .order("check_in_time", desc=True)
            .execute()
        )
        return split_bookings(response.data or [], _now())
    except Exception as e:
        raise BookingError(f"Failed to fetch user bookings: {e}") from e


def _set_status(booking_id: str, status: BookingStatus) -> Dict[str, Any]:
    try:
        response = (
            get_supabase_client()
            .table("bookings")
            .update({"status": status.value, "updated_at": _now().isoformat()})
            .eq("id", booking_id)
            .execute()
        )
    except Exception as e:
        raise BookingError(f"Failed to update booking {booking_id}: {e}") from e
    if not response.data:
        raise BookingError(f"Booking {booking_id} not found")
    logger.info(f"Booking {booking_id} marked {status.value}")
    return response.data[0]


def cancel_booking(booking_id: str) -> Dict[str, Any]:
    return _set_status(booking_id, BookingStatus.cancelled)


def complete_booking(booking_id: str) -> Dict[str, Any]:
    return _set_status(booking_id, BookingStatus.completed)


def get_booking_by_id(booking_id: str) -> Dict[str, Any]:
    try:
        response = (
            get_supabase_client()
            .table("bookings")
            .select("*")
            .eq("id", booking_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise BookingError(f"Failed to fetch booking: {e}") from e
    if not response.data:
        raise BookingError(f"Booking {booking_id} not found")
    return response.data[0]

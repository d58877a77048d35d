from fastapi import APIRouter

from ..exceptions import ParkingAPIError
from ..schemas.auth import (
    AuthResponse,
    GoogleSignInRequest,
    RegisterProfileRequest,
    SyncProfileRequest,
)
from ..services import auth as auth_service
from ..utils import logger

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/google", response_model=AuthResponse)
async def google_sign_in(request: GoogleSignInRequest):
    if not request.id_token:
        raise ParkingAPIError(400, "Missing idToken in request body")
    try:
        profile = await auth_service.verify_id_token(request.id_token)
    except Exception as e:
        logger.exception(f"Google sign-in error: {e}")
        raise ParkingAPIError(500, "Failed to sign in with Google", str(e)) from e
    if profile is None:
        raise ParkingAPIError(401, "Invalid ID token")
    return AuthResponse(user=profile)


@router.post("/sync", response_model=AuthResponse)
async def sync_profile(request: SyncProfileRequest):
    """Verify a Supabase access token and make sure the user has a profile row."""
    if not request.access_token:
        raise ParkingAPIError(400, "Missing accessToken in request body")
    try:
        profile = auth_service.sync_profile_from_supabase(request.access_token)
    except Exception as e:
        logger.exception(f"Sync profile error: {e}")
        raise ParkingAPIError(500, "Failed to sync profile", str(e)) from e
    if profile is None:
        raise ParkingAPIError(401, "Invalid Supabase access token")
    return AuthResponse(user=profile)


@router.post("/register-profile", response_model=AuthResponse)
async def register_profile(request: RegisterProfileRequest):
    if not request.access_token:
        raise ParkingAPIError(400, "Missing accessToken in request body")
    try:
        profile = auth_service.register_profile(
            request.access_token,
            first_name=request.first_name,
            family_name=request.family_name,
            phone=request.phone,
            full_name=request.full_name,
        )
    except Exception as e:
        logger.exception(f"Register profile error: {e}")
        raise ParkingAPIError(500, "Failed to register profile", str(e)) from e
    return AuthResponse(user=profile)


@router.get("/check-profile/{user_id}")
async def check_profile(user_id: str):
    return auth_service.check_profile_exists(user_id)

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..config.supabase import get_supabase_client
from ..schemas.auth import UserProfile
from ..utils import logger


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def ensure_profile(profile: UserProfile) -> None:
    """Create the ``profiles`` row for a signed-in user if it is missing.

    Failures are logged and swallowed: a missing profile row must not block
    login.
    """
    try:
        supabase = get_supabase_client()
        existing = (
            supabase.table("profiles").select("id").eq("id", profile.id).limit(1).execute()
        )
        if existing.data:
            logger.info(f"✅ Profile already exists for {profile.id}")
            return

        logger.info(f"📝 Profile doesn't exist for {profile.id}, creating...")
        supabase.table("profiles").insert(
            {
                "id": profile.id,
                "email": profile.email,
                "full_name": profile.name,
                "avatar_url": profile.picture,
                "provider": profile.provider,
                "updated_at": _now_iso(),
            }
        ).execute()
        logger.info("✅ Profile created successfully")
    except Exception as e:
        logger.warning(f"Profile check/creation failed for {profile.id}: {e}")


async def verify_id_token(id_token: str) -> Optional[UserProfile]:
    """Verify a Google ID token with Google's tokeninfo endpoint."""
    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(
                settings.GOOGLE_TOKENINFO_URL, params={"id_token": id_token}
            )
            response.raise_for_status()
            data: Dict[str, Any] = response.json()
    except Exception as e:
        logger.error(f"Failed to verify ID token: {e}")
        return None

    if settings.GOOGLE_CLIENT_ID and data.get("aud") and data["aud"] != settings.GOOGLE_CLIENT_ID:
        logger.warning("ID token audience does not match configured GOOGLE_CLIENT_ID")
        return None
    if not data.get("sub"):
        logger.warning("ID token has no subject")
        return None

    profile = UserProfile(
        id=data["sub"],
        email=data.get("email"),
        email_verified=data.get("email_verified") in ("true", True),
        name=data.get("name"),
        given_name=data.get("given_name"),
        family_name=data.get("family_name"),
        picture=data.get("picture"),
        locale=data.get("locale"),
        provider="google",
    )
    ensure_profile(profile)
    return profile


def _user_from_token(access_token: str):
    supabase = get_supabase_client()
    response = supabase.auth.get_user(access_token)
    return response.user if response else None


def sync_profile_from_supabase(access_token: str) -> Optional[UserProfile]:
    """Resolve a Supabase access token to a profile, creating its row if needed."""
    try:
        user = _user_from_token(access_token)
    except Exception as e:
        logger.warning(f"supabase.auth.get_user error: {e}")
        return None
    if user is None or not user.email:
        return None

    metadata = user.user_metadata or {}
    app_metadata = user.app_metadata or {}
    profile = UserProfile(
        id=str(user.id),
        email=user.email,
        email_verified=bool(user.email_confirmed_at),
        name=metadata.get("full_name") or metadata.get("name"),
        given_name=metadata.get("given_name"),
        family_name=metadata.get("family_name"),
        picture=metadata.get("avatar_url") or metadata.get("picture"),
        provider=app_metadata.get("provider") or "supabase",
    )
    ensure_profile(profile)
    return profile


def check_profile_exists(user_id: str) -> Dict[str, Any]:
    try:
        supabase = get_supabase_client()
        response = (
            supabase.table("profiles")
            .select("id, email, full_name")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Profile check exception for {user_id}: {e}")
        return {"exists": False, "userId": user_id, "error": str(e)}

    if not response.data:
        return {"exists": False, "userId": user_id, "error": "Profile not found"}
    return {"exists": True, "userId": user_id, "profile": response.data[0]}


def register_profile(
    access_token: str,
    first_name: Optional[str] = None,
    family_name: Optional[str] = None,
    phone: Optional[str] = None,
    full_name: Optional[str] = None,
) -> UserProfile:
    """Insert an extended profile row right after sign-up. Raises on failure."""
    user = _user_from_token(access_token)
    if user is None or not user.email:
        raise ValueError("Invalid user data from token")

    metadata = user.user_metadata or {}
    logger.info(f"📝 Registering profile for user: {user.id}, email: {user.email}")
    row = {
        "id": str(user.id),
        "email": user.email,
        "full_name": full_name or metadata.get("full_name"),
        "given_name": first_name or metadata.get("given_name"),
        "family_name": family_name or metadata.get("family_name"),
        "phone": phone,
        "provider": "supabase",
        "updated_at": _now_iso(),
    }
    get_supabase_client().table("profiles").insert(row).execute()
    logger.info(f"✅ Profile registered successfully for user {user.id}")

    return UserProfile(
        id=row["id"],
        email=row["email"],
        name=row["full_name"],
        given_name=first_name,
        family_name=family_name,
        phone=phone,
        provider="supabase",
    )

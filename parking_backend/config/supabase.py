from typing import Optional

from supabase import create_client
from supabase.client import Client

from . import settings
from ..utils import logger

supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Initializes and returns the Supabase admin client (service role key)."""
    global supabase_client
    if supabase_client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_KEY:
            raise ValueError(
                "Supabase URL or SERVICE ROLE KEY not found in environment variables."
            )
        try:
            logger.info("Initializing Supabase client (using Service Role Key)...")
            supabase_client = create_client(
                settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY
            )
            logger.info("Supabase client initialized.")
        except Exception as e:
            logger.error(f"FATAL: Error initializing Supabase client: {e}")
            raise ConnectionError("Failed to initialize Supabase client") from e
    return supabase_client


def test_supabase_connection() -> bool:
    """Tests the connection to Supabase."""
    try:
        client = get_supabase_client()
        response = client.from_("profiles").select("id").limit(1).execute()
        if getattr(response, "error", None):
            logger.warning(f"Supabase connection error: {response.error}")
            return False
        logger.info("Supabase connected successfully")
        return True
    except Exception as e:
        logger.warning(f"Error testing Supabase connection: {e}")
        return False

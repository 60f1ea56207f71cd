# catalogy/core/supabase_client.py
from supabase import create_client, Client

from catalogy.core.config import Settings
from catalogy.core.errors import ConfigurationError


def supabase_admin(settings: Settings) -> Client:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - reading/writing profiles, preferences and analytics tables
      - any operation that needs to bypass RLS

    WARNING:
      - Never expose service role key to frontend.
      - Only backend should call this.

    Raises:
        ConfigurationError: if SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise ConfigurationError(
            "Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY in .env"
        )
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)

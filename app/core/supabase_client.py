# app/core/supabase_client.py
from functools import lru_cache
from supabase import create_client, Client

from app.core.config import get_settings

settings = get_settings()


@lru_cache
def supabase_public() -> Client:
    """
    Create a Supabase client with the anon/public key.

    Use cases:
      - verifying access tokens via Supabase Auth when no JWT secret
        is configured for local verification

    Note: This client still respects RLS.

    Raises:
        RuntimeError: if SUPABASE_URL / SUPABASE_KEY are not set.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise RuntimeError("Missing SUPABASE_URL or SUPABASE_KEY in .env")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)

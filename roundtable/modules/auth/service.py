import hashlib
import logging
import time
from supabase import Client
from roundtable.config import settings
from roundtable.modules.auth.schemas import CurrentUser
from fastapi import HTTPException
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. seat view polling with the same token)
_AUTH_USER_CACHE: Dict[str, Tuple[CurrentUser, float]] = {}


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_current_user(self, token: str) -> CurrentUser:
        """Resolve a Supabase Auth access token into {id, username, email}. Uses short TTL cache."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if cache_key in _AUTH_USER_CACHE:
            user, expiry = _AUTH_USER_CACHE[cache_key]
            if now < expiry:
                return user
            del _AUTH_USER_CACHE[cache_key]

        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            error_msg = str(e)
            logger.info("Token rejected: %s", error_msg)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        auth_user = user_response.user
        metadata = auth_user.user_metadata or {}
        email = auth_user.email or ""
        user = CurrentUser(
            id=auth_user.id,
            email=email,
            username=metadata.get("username") or email.split("@")[0] or auth_user.id,
        )
        if len(_AUTH_USER_CACHE) < settings.auth_cache_max_size:
            _AUTH_USER_CACHE[cache_key] = (user, now + settings.auth_cache_ttl_seconds)
        return user

import logging
from typing import Dict, Optional, Type

from postgrest.exceptions import APIError
from supabase import create_client, Client

from roundtable.config import settings
from roundtable.core.errors import ServiceError, StoreFailure

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def execute(query, action: str, conflicts: Optional[Dict[str, Type[ServiceError]]] = None):
    """Run a PostgREST query. Unique violations on a constraint listed in
    conflicts raise the mapped error; every other failure becomes StoreFailure."""
    try:
        return query.execute()
    except APIError as e:
        if e.code == UNIQUE_VIOLATION and conflicts:
            text = f"{e.message or ''} {e.details or ''}"
            for constraint, error in conflicts.items():
                if constraint in text:
                    raise error() from e
        logger.error("Failed to %s: [%s] %s", action, e.code, e.message)
        raise StoreFailure(f"Failed to {action}") from e
    except ServiceError:
        raise
    except Exception as e:
        logger.exception("Failed to %s: %s", action, e)
        raise StoreFailure(f"Failed to {action}") from e

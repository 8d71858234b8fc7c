"""Shared fixtures: an in-memory Supabase client seeded with one active table."""

import pytest
from fastapi.testclient import TestClient

from roundtable.database.supabase_client import get_supabase
from roundtable.main import app, limiter
from roundtable.modules.auth.service import clear_auth_cache
from roundtable.modules.groups.service import GroupService
from roundtable.modules.members.service import MemberService
from roundtable.modules.seats.service import SeatService
from tests.fakes import FakeSupabase

GROUP_ID = "group-1"
INACTIVE_GROUP_ID = "group-closed"

USERS = [
    {"id": "alice", "username": "alice", "email": "alice@example.com",
     "nationality": "JP", "native_language": "Japanese", "target_language": "English"},
    {"id": "bob", "username": "bob", "email": "bob@example.com",
     "nationality": "DE", "native_language": "German", "target_language": "Spanish"},
    {"id": "carol", "username": "carol", "email": "carol@example.com",
     "nationality": None, "native_language": None, "target_language": None},
    {"id": "dave", "username": "dave", "email": "dave@example.com",
     "nationality": "FR", "native_language": "French", "target_language": "English"},
]


def member_row(fake, user_id, group_id=GROUP_ID):
    """Raw group_members row as currently stored"""
    for row in fake.tables["group_members"]:
        if row["group_id"] == group_id and row["user_id"] == user_id:
            return row
    return None


@pytest.fixture(autouse=True)
def _clear_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def fake_supabase():
    """Alice owns group-1; bob and carol are listeners; dave is not a member."""
    fake = FakeSupabase()
    fake.tables["user_profiles"] = [dict(user) for user in USERS]
    fake.tables["groups"] = [
        {"id": GROUP_ID, "name": "Spanish corner", "language": "Spanish", "description": None,
         "owner_id": "alice", "is_active": True,
         "created_at": "2026-01-01T09:00:00+00:00", "updated_at": None},
        {"id": INACTIVE_GROUP_ID, "name": "Archived", "language": "French", "description": None,
         "owner_id": "bob", "is_active": False,
         "created_at": "2025-12-01T09:00:00+00:00", "updated_at": None},
    ]
    fake.tables["group_members"] = [
        {"id": "m-alice", "group_id": GROUP_ID, "user_id": "alice", "role": "OWNER",
         "seat_position": None, "is_admin": True, "is_muted": False, "is_deafened": False,
         "joined_at": "2026-01-01T10:00:00+00:00"},
        {"id": "m-bob", "group_id": GROUP_ID, "user_id": "bob", "role": "LISTENER",
         "seat_position": None, "is_admin": False, "is_muted": False, "is_deafened": False,
         "joined_at": "2026-01-01T10:01:00+00:00"},
        {"id": "m-carol", "group_id": GROUP_ID, "user_id": "carol", "role": "LISTENER",
         "seat_position": None, "is_admin": False, "is_muted": False, "is_deafened": False,
         "joined_at": "2026-01-01T10:02:00+00:00"},
        {"id": "m-bob-closed", "group_id": INACTIVE_GROUP_ID, "user_id": "bob", "role": "OWNER",
         "seat_position": None, "is_admin": True, "is_muted": False, "is_deafened": False,
         "joined_at": "2025-12-01T09:00:00+00:00"},
    ]
    for user in USERS:
        fake.auth.add_token(f"token-{user['id']}", user["id"], user["email"], user["username"])
    return fake


@pytest.fixture
def seat_service(fake_supabase):
    return SeatService(fake_supabase)


@pytest.fixture
def member_service(fake_supabase):
    return MemberService(fake_supabase)


@pytest.fixture
def group_service(fake_supabase):
    return GroupService(fake_supabase)


@pytest.fixture
def client(fake_supabase):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id):
        return {"Authorization": f"Bearer token-{user_id}"}
    return _headers

from typing import Any, Dict, List, Optional

from supabase import Client

from roundtable.core.errors import SeatOccupied, StoreFailure
from roundtable.database.supabase_client import execute
from roundtable.modules.members.schemas import Membership, Profile

MEMBER_COLUMNS = "id, group_id, user_id, role, seat_position, is_admin, is_muted, is_deafened, joined_at"
PROFILE_EMBED = "user_profiles(id, username, email, nationality, native_language, target_language)"

SEAT_INDEX_NAME = "group_members_seat_key"


def _to_membership(row: Dict[str, Any]) -> Membership:
    data = dict(row)
    profile = data.pop("user_profiles", None)
    # PostgREST returns a list for to-many embeds; group_members -> user_profiles is to-one
    if isinstance(profile, list):
        profile = profile[0] if profile else None
    return Membership(**data, profile=Profile(**profile) if profile else None)


class MembershipStore:
    """Membership rows in group_members, keyed on (group_id, user_id)."""

    table = "group_members"

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _execute(self, query, action: str):
        return execute(query, f"{action} membership", conflicts={SEAT_INDEX_NAME: SeatOccupied})

    def find(self, group_id: str, user_id: str) -> Optional[Membership]:
        result = self._execute(
            self.supabase.table(self.table)
            .select(f"{MEMBER_COLUMNS}, {PROFILE_EMBED}")
            .eq("group_id", group_id)
            .eq("user_id", user_id)
            .limit(1),
            "read",
        )
        if not result.data:
            return None
        return _to_membership(result.data[0])

    def find_seat_occupant(self, group_id: str, seat_index: int) -> Optional[Membership]:
        result = self._execute(
            self.supabase.table(self.table)
            .select(MEMBER_COLUMNS)
            .eq("group_id", group_id)
            .eq("seat_position", seat_index)
            .limit(1),
            "read",
        )
        if not result.data:
            return None
        return _to_membership(result.data[0])

    def list_by_group(self, group_id: str) -> List[Membership]:
        """All memberships of a group with profiles, by seat then join time"""
        result = self._execute(
            self.supabase.table(self.table)
            .select(f"{MEMBER_COLUMNS}, {PROFILE_EMBED}")
            .eq("group_id", group_id)
            .order("seat_position")
            .order("joined_at"),
            "list",
        )
        return [_to_membership(row) for row in result.data or []]

    def upsert(self, group_id: str, user_id: str, fields: Dict[str, Any]) -> Membership:
        row = {**fields, "group_id": group_id, "user_id": user_id}
        result = self._execute(
            self.supabase.table(self.table).upsert(row, on_conflict="group_id,user_id"),
            "save",
        )
        if not result.data:
            raise StoreFailure("Failed to save membership")
        return _to_membership(result.data[0])

    def update(self, group_id: str, user_id: str, fields: Dict[str, Any]) -> None:
        self._execute(
            self.supabase.table(self.table)
            .update(fields)
            .eq("group_id", group_id)
            .eq("user_id", user_id),
            "update",
        )

    def update_unseated(self, group_id: str, user_id: str, fields: Dict[str, Any]) -> bool:
        """Update only while the member holds no seat; False when no row matched"""
        result = self._execute(
            self.supabase.table(self.table)
            .update(fields)
            .eq("group_id", group_id)
            .eq("user_id", user_id)
            .or_("seat_position.is.null,seat_position.lt.0"),
            "update",
        )
        return bool(result.data)

    def delete(self, group_id: str, user_id: str) -> bool:
        result = self._execute(
            self.supabase.table(self.table)
            .delete()
            .eq("group_id", group_id)
            .eq("user_id", user_id),
            "delete",
        )
        return bool(result.data)

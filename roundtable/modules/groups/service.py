import logging
from datetime import datetime, timezone
from typing import List

from supabase import Client

from roundtable.core.errors import NotFound, StoreFailure
from roundtable.database.supabase_client import execute
from roundtable.modules.groups.schemas import GroupCreate, GroupResponse
from roundtable.modules.members.repository import MembershipStore
from roundtable.modules.members.schemas import MemberRole

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.members = MembershipStore(supabase)

    def create_group(self, group_data: GroupCreate, owner_id: str) -> GroupResponse:
        """Create a new group and seat-less OWNER membership for its creator"""
        now = datetime.now(timezone.utc).isoformat()
        result = execute(
            self.supabase.table("groups").insert({
                "name": group_data.name.strip(),
                "language": group_data.language.strip(),
                "description": (group_data.description or "").strip() or None,
                "owner_id": owner_id,
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            }),
            "create group",
        )
        if not result.data:
            raise StoreFailure("Failed to create group")
        group = GroupResponse(**result.data[0])

        self.members.upsert(group.id, owner_id, {
            "role": MemberRole.OWNER.value,
            "is_admin": True,
            "seat_position": None,
            "joined_at": now,
        })
        logger.info("Group %s created by %s", group.id, owner_id)
        return group

    def get_group(self, group_id: str) -> GroupResponse:
        """Get group by ID"""
        result = execute(
            self.supabase.table("groups")
            .select("*")
            .eq("id", group_id)
            .limit(1),
            "read group",
        )
        if not result.data:
            raise NotFound("Group not found")
        return GroupResponse(**result.data[0])

    def get_active_group(self, group_id: str) -> GroupResponse:
        group = self.get_group(group_id)
        if not group.is_active:
            raise NotFound("Group not found or inactive")
        return group

    def list_groups(self, limit: int = 20, offset: int = 0) -> List[GroupResponse]:
        """List active groups, newest first"""
        result = execute(
            self.supabase.table("groups")
            .select("*")
            .eq("is_active", True)
            .order("created_at", desc=True)
            .limit(limit)
            .offset(offset),
            "list groups",
        )
        return [GroupResponse(**group) for group in result.data or []]

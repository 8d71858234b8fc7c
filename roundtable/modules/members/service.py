import logging
from datetime import datetime, timezone
from typing import List, Tuple

from supabase import Client

from roundtable.core.errors import (
    InvalidTransition, NotAMember, NotFound, PermissionDenied, ValidationError
)
from roundtable.modules.groups.schemas import GroupResponse
from roundtable.modules.groups.service import GroupService
from roundtable.modules.members.repository import MembershipStore
from roundtable.modules.members.schemas import (
    MemberRole, Membership, VoiceAction, VoiceControlResponse, VOICE_ACTION_UPDATES
)

logger = logging.getLogger(__name__)


def is_group_owner(group: GroupResponse, member: Membership) -> bool:
    return group.owner_id == member.user_id or member.is_owner


def is_group_moderator(group: GroupResponse, member: Membership) -> bool:
    return is_group_owner(group, member) or member.is_admin


class MemberService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.members = MembershipStore(supabase)
        self.groups = GroupService(supabase)

    def get_membership(self, group_id: str, user_id: str) -> Membership:
        member = self.members.find(group_id, user_id)
        if member is None:
            raise NotAMember()
        return member

    def get_target(self, group_id: str, user_id: str) -> Membership:
        member = self.members.find(group_id, user_id)
        if member is None:
            raise NotFound("Target user is not a member of this group")
        return member

    def require_moderator(self, group_id: str, actor_id: str) -> Tuple[GroupResponse, Membership]:
        """Resolve an active group and an actor who is its owner or an admin"""
        group = self.groups.get_active_group(group_id)
        actor = self.get_membership(group_id, actor_id)
        if not is_group_moderator(group, actor):
            raise PermissionDenied("You must be the group owner or an admin to perform this action")
        return group, actor

    def list_members(self, group_id: str) -> List[Membership]:
        self.groups.get_group(group_id)
        return self.members.list_by_group(group_id)

    def join_group(self, group_id: str, user_id: str) -> Membership:
        """Join as a seat-less listener. Joining twice returns the existing membership."""
        group = self.groups.get_group(group_id)
        if not group.is_active:
            raise ValidationError("Cannot join inactive group")

        existing = self.members.find(group_id, user_id)
        if existing is not None:
            return existing

        member = self.members.upsert(group_id, user_id, {
            "role": MemberRole.LISTENER.value,
            "seat_position": None,
            "is_admin": False,
            "joined_at": datetime.now(timezone.utc).isoformat(),
        })
        logger.info("User %s joined group %s", user_id, group_id)
        return member

    def leave_group(self, group_id: str, user_id: str) -> None:
        member = self.get_membership(group_id, user_id)
        if member.is_owner:
            raise InvalidTransition(
                "Group owner cannot leave the group. Transfer ownership or delete the group instead."
            )
        self.members.delete(group_id, user_id)
        logger.info("User %s left group %s", user_id, group_id)

    def kick_member(self, group_id: str, actor_id: str, target_id: str) -> None:
        group, _ = self.require_moderator(group_id, actor_id)
        target = self.get_target(group_id, target_id)
        if is_group_owner(group, target):
            raise InvalidTransition("Cannot kick the group owner")
        self.members.delete(group_id, target_id)
        logger.info("User %s kicked from group %s by %s", target_id, group_id, actor_id)

    def set_admin(self, group_id: str, actor_id: str, target_id: str, is_admin: bool) -> Membership:
        """Grant or revoke admin; owner only"""
        group = self.groups.get_active_group(group_id)
        actor = self.get_membership(group_id, actor_id)
        if not is_group_owner(group, actor):
            raise PermissionDenied("Only the group owner can change admin privileges")
        target = self.get_target(group_id, target_id)
        if is_group_owner(group, target):
            raise InvalidTransition("The group owner's privileges cannot be changed")

        self.members.update(group_id, target_id, {"is_admin": is_admin})
        logger.info("Admin %s for %s in group %s", "granted" if is_admin else "revoked", target_id, group_id)
        return target.model_copy(update={"is_admin": is_admin})

    def voice_control(
        self, group_id: str, actor_id: str, target_id: str, action: VoiceAction
    ) -> VoiceControlResponse:
        """Mute/deafen flags. Members control themselves; moderators control others."""
        group = self.groups.get_active_group(group_id)
        actor = self.get_membership(group_id, actor_id)
        target = self.get_target(group_id, target_id)

        if actor_id != target_id:
            if not is_group_moderator(group, actor):
                raise PermissionDenied("You do not have permission to control other users")
            if is_group_owner(group, target) and not is_group_owner(group, actor):
                raise PermissionDenied("Only the group owner can control the owner")

        updates = VOICE_ACTION_UPDATES[action]
        self.members.update(group_id, target_id, updates)
        logger.info("Voice control %s for %s in group %s", action.value, target_id, group_id)

        updated = target.model_copy(update=updates)
        return VoiceControlResponse(
            user_id=target_id,
            action=action,
            is_muted=updated.is_muted,
            is_deafened=updated.is_deafened,
        )

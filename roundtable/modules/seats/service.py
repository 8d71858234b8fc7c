"""
Seat & request management for a group's voice table.

A member is UNSEATED, REQUESTING(k) or SEATED(k). Members move themselves
between UNSEATED and REQUESTING; owners and admins approve, deny and move.
Seat assignment is a conditional write: the occupant is checked first and the
partial unique index on (group_id, seat_position) rejects a concurrent writer.
"""

import logging
from typing import List, Optional

from supabase import Client

from roundtable.core.errors import InvalidTransition, SeatOccupied, ValidationError
from roundtable.modules.groups.schemas import GroupResponse
from roundtable.modules.members.schemas import MemberRole, Membership
from roundtable.modules.members.service import MemberService, is_group_owner
from roundtable.modules.seats.schemas import (
    GroupOwner, SeatGroup, SeatedUser, SeatView, TableSeat, WaitingUser
)
from roundtable.modules.seats.state import SEAT_COUNT, SeatState, validate_seat_index

logger = logging.getLogger(__name__)

DEFAULT_NATIONALITY = "US"
DEFAULT_NATIVE_LANGUAGE = "English"
DEFAULT_TARGET_LANGUAGE = "Spanish"


def _seat_state(member: Membership) -> SeatState:
    try:
        return member.seat_state
    except ValidationError:
        logger.warning(
            "Ignoring invalid seat_position %s for %s in group %s",
            member.seat_position, member.user_id, member.group_id,
        )
        return SeatState.unseated()


def _profile_fields(member: Membership) -> dict:
    profile = member.profile
    return {
        "id": member.user_id,
        "name": profile.username if profile else member.user_id,
        "role": member.role,
        "nationality": (profile and profile.nationality) or DEFAULT_NATIONALITY,
        "native_language": (profile and profile.native_language) or DEFAULT_NATIVE_LANGUAGE,
        "target_language": (profile and profile.target_language) or DEFAULT_TARGET_LANGUAGE,
        "joined_at": member.joined_at,
    }


def _owner_summary(group: GroupResponse, memberships: List[Membership]) -> GroupOwner:
    owner = next((m for m in memberships if m.user_id == group.owner_id), None)
    if owner is None:
        logger.warning("Owner %s of group %s has no membership row", group.owner_id, group.id)
        return GroupOwner(
            id=group.owner_id,
            name=group.owner_id,
            nationality=DEFAULT_NATIONALITY,
            native_language=DEFAULT_NATIVE_LANGUAGE,
            target_language=DEFAULT_TARGET_LANGUAGE,
        )
    fields = _profile_fields(owner)
    return GroupOwner(**{key: fields[key] for key in GroupOwner.model_fields})


class SeatService:
    def __init__(self, supabase: Client):
        self.member_service = MemberService(supabase)
        self.members = self.member_service.members
        self.groups = self.member_service.groups

    def compute_seat_view(self, group_id: str) -> SeatView:
        """Ten positional table seats plus the waiting list in join order"""
        group = self.groups.get_active_group(group_id)
        memberships = self.members.list_by_group(group_id)

        table_seats = [TableSeat(position=position) for position in range(SEAT_COUNT)]
        waiting_users = []

        for member in memberships:
            state = _seat_state(member)
            if state.is_seated:
                current = table_seats[state.seat].user
                if current is not None:
                    # last write wins; only reachable with rows written around the seat index
                    logger.warning(
                        "Seat %s in group %s claimed by both %s and %s",
                        state.seat, group_id, current.id, member.user_id,
                    )
                table_seats[state.seat] = TableSeat(
                    position=state.seat,
                    user=SeatedUser(
                        **_profile_fields(member),
                        is_owner=is_group_owner(group, member),
                        is_admin=member.is_admin,
                        is_muted=member.is_muted,
                    ),
                )
            else:
                waiting_users.append(WaitingUser(
                    **_profile_fields(member),
                    has_requested=state.is_requesting,
                    requested_seat_position=state.seat,
                    requested_at=member.joined_at,
                ))

        waiting_users.sort(key=lambda user: user.joined_at)
        return SeatView(
            group_id=group_id,
            group=SeatGroup(
                id=group.id,
                name=group.name,
                language=group.language,
                description=group.description,
                owner=_owner_summary(group, memberships),
            ),
            member_count=len(memberships),
            table_seats=table_seats,
            waiting_users=waiting_users,
        )

    def request_seat(self, group_id: str, user_id: str, seat_index: int) -> SeatState:
        """Mark a member as requesting seat_index; occupancy is checked on approval"""
        validate_seat_index(seat_index)
        self.groups.get_active_group(group_id)
        member = self.member_service.get_membership(group_id, user_id)
        if _seat_state(member).is_seated:
            raise InvalidTransition("Leave your current seat before requesting another one")

        state = SeatState.requesting(seat_index)
        # only a row that is still unseated or requesting takes the request
        if not self.members.update_unseated(group_id, user_id, {"seat_position": state.encode()}):
            raise InvalidTransition("Leave your current seat before requesting another one")
        logger.info("User %s requested seat %s in group %s", user_id, seat_index, group_id)
        return state

    def set_seat(self, group_id: str, user_id: str, seat_index: Optional[int]) -> SeatState:
        """Seat a member at seat_index, or vacate when seat_index is None"""
        if seat_index is None:
            return self._vacate(group_id, user_id)

        validate_seat_index(seat_index)
        self.groups.get_active_group(group_id)
        member = self.member_service.get_membership(group_id, user_id)
        state = SeatState.seated(seat_index)
        if _seat_state(member) == state:
            return state

        occupant = self.members.find_seat_occupant(group_id, seat_index)
        if occupant is not None and occupant.user_id != user_id:
            raise SeatOccupied(f"Seat {seat_index} is already occupied")

        fields = {"seat_position": state.encode()}
        if not member.is_owner:
            fields["role"] = MemberRole.SPEAKER.value
        self.members.update(group_id, user_id, fields)
        logger.info("User %s seated at %s in group %s", user_id, seat_index, group_id)
        return state

    def _vacate(self, group_id: str, user_id: str) -> SeatState:
        self.groups.get_active_group(group_id)
        member = self.member_service.get_membership(group_id, user_id)
        fields = {"seat_position": None}
        if not member.is_owner:
            fields["role"] = MemberRole.LISTENER.value
        self.members.update(group_id, user_id, fields)
        logger.info("User %s moved to waiting area in group %s", user_id, group_id)
        return SeatState.unseated()

    def leave_seat(self, group_id: str, user_id: str) -> SeatState:
        """Cancel own request or give up own seat"""
        return self.set_seat(group_id, user_id, None)

    def approve_request(
        self, group_id: str, actor_id: str, target_id: str, seat_index: Optional[int] = None
    ) -> SeatState:
        self.member_service.require_moderator(group_id, actor_id)
        target = self.member_service.get_target(group_id, target_id)
        requested = _seat_state(target)
        if not requested.is_requesting:
            raise InvalidTransition("User has no pending seat request")
        return self.set_seat(group_id, target_id, requested.seat if seat_index is None else seat_index)

    def deny_request(self, group_id: str, actor_id: str, target_id: str) -> SeatState:
        self.member_service.require_moderator(group_id, actor_id)
        target = self.member_service.get_target(group_id, target_id)
        if not _seat_state(target).is_requesting:
            raise InvalidTransition("User has no pending seat request")
        return self.set_seat(group_id, target_id, None)

    def move_to_seat(self, group_id: str, actor_id: str, target_id: str, seat_index: int) -> SeatState:
        validate_seat_index(seat_index)
        self.member_service.require_moderator(group_id, actor_id)
        self.member_service.get_target(group_id, target_id)
        return self.set_seat(group_id, target_id, seat_index)

    def move_to_waiting(self, group_id: str, actor_id: str, target_id: str) -> SeatState:
        self.member_service.require_moderator(group_id, actor_id)
        self.member_service.get_target(group_id, target_id)
        return self.set_seat(group_id, target_id, None)

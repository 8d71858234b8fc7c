from fastapi import APIRouter, Depends
from roundtable.database.supabase_client import get_supabase
from roundtable.core.dependencies import get_current_user
from roundtable.modules.auth.schemas import CurrentUser
from roundtable.modules.members.schemas import MemberResponse, VoiceControlRequest, VoiceControlResponse
from roundtable.modules.members.service import MemberService
from supabase import Client
from typing import List

router = APIRouter(prefix="/groups/{group_id}/members", tags=["members"])


def get_member_service(supabase: Client = Depends(get_supabase)) -> MemberService:
    return MemberService(supabase)


@router.get("", response_model=List[MemberResponse])
async def list_members(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    """List all members of a group with their profiles"""
    return service.list_members(group_id)


@router.post("/me", response_model=MemberResponse, status_code=201)
async def join_group(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    """Join the group as a listener"""
    return service.join_group(group_id, current_user.id)


@router.delete("/me", status_code=204)
async def leave_group(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    """Leave the group (not allowed for the owner)"""
    service.leave_group(group_id, current_user.id)
    return None


@router.delete("/{user_id}", status_code=204)
async def kick_member(
    group_id: str,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    """Remove a member from the group (requires group owner or admin)"""
    service.kick_member(group_id, current_user.id, user_id)
    return None


@router.put("/{user_id}/admin", response_model=MemberResponse)
async def grant_admin(
    group_id: str,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    """Grant admin privileges (group owner only)"""
    return service.set_admin(group_id, current_user.id, user_id, True)


@router.delete("/{user_id}/admin", response_model=MemberResponse)
async def revoke_admin(
    group_id: str,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    """Revoke admin privileges (group owner only)"""
    return service.set_admin(group_id, current_user.id, user_id, False)


@router.post("/{user_id}/voice", response_model=VoiceControlResponse)
async def voice_control(
    group_id: str,
    user_id: str,
    body: VoiceControlRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    """Mute, unmute, deafen or undeafen a member"""
    return service.voice_control(group_id, current_user.id, user_id, body.action)

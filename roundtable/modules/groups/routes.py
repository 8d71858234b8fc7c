from fastapi import APIRouter, Depends, Query
from roundtable.database.supabase_client import get_supabase
from roundtable.core.dependencies import get_current_user
from roundtable.modules.auth.schemas import CurrentUser
from roundtable.modules.groups.schemas import GroupCreate, GroupResponse
from roundtable.modules.groups.service import GroupService
from supabase import Client
from typing import List

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group owned by the current user"""
    return service.create_group(group_data, current_user.id)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """List active groups, newest first"""
    return service.list_groups(limit=limit, offset=offset)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Get group by ID"""
    return service.get_group(group_id)

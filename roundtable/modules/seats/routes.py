from fastapi import APIRouter, Depends
from roundtable.database.supabase_client import get_supabase
from roundtable.core.dependencies import get_current_user
from roundtable.modules.auth.schemas import CurrentUser
from roundtable.modules.seats.schemas import SeatActionResponse, SeatApproval, SeatAssignment, SeatView
from roundtable.modules.seats.service import SeatService
from roundtable.modules.seats.state import SeatState
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/groups/{group_id}/seats", tags=["seats"])


def get_seat_service(supabase: Client = Depends(get_supabase)) -> SeatService:
    return SeatService(supabase)


def _action_response(group_id: str, user_id: str, state: SeatState, message: str) -> SeatActionResponse:
    return SeatActionResponse(
        group_id=group_id,
        user_id=user_id,
        status=state.status,
        seat=state.seat,
        seat_position=state.encode(),
        message=message,
    )


@router.get("", response_model=SeatView)
async def get_seat_view(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SeatService = Depends(get_seat_service)
):
    """Table seats and waiting list of an active group"""
    return service.compute_seat_view(group_id)


@router.delete("/me", response_model=SeatActionResponse)
async def leave_seat(
    group_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SeatService = Depends(get_seat_service)
):
    """Give up own seat or cancel own seat request"""
    state = service.leave_seat(group_id, current_user.id)
    return _action_response(group_id, current_user.id, state, "Moved to the waiting area")


@router.post("/{seat_index}/request", response_model=SeatActionResponse)
async def request_seat(
    group_id: str,
    seat_index: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: SeatService = Depends(get_seat_service)
):
    """Request a seat at the table (current user must be a member)"""
    state = service.request_seat(group_id, current_user.id, seat_index)
    return _action_response(group_id, current_user.id, state, "Seat request submitted")


@router.post("/requests/{user_id}/approve", response_model=SeatActionResponse)
async def approve_request(
    group_id: str,
    user_id: str,
    approval: Optional[SeatApproval] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: SeatService = Depends(get_seat_service)
):
    """Seat a requesting member (requires group owner or admin)"""
    state = service.approve_request(group_id, current_user.id, user_id, approval.seat_index if approval else None)
    return _action_response(group_id, user_id, state, f"User assigned to Section {state.seat + 1}")


@router.post("/requests/{user_id}/deny", response_model=SeatActionResponse)
async def deny_request(
    group_id: str,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SeatService = Depends(get_seat_service)
):
    """Reject a pending seat request (requires group owner or admin)"""
    state = service.deny_request(group_id, current_user.id, user_id)
    return _action_response(group_id, user_id, state, "Seat request rejected")


@router.put("/{seat_index}/occupant", response_model=SeatActionResponse)
async def move_to_seat(
    group_id: str,
    seat_index: int,
    assignment: SeatAssignment,
    current_user: CurrentUser = Depends(get_current_user),
    service: SeatService = Depends(get_seat_service)
):
    """Move any member to a free seat (requires group owner or admin)"""
    state = service.move_to_seat(group_id, current_user.id, assignment.user_id, seat_index)
    return _action_response(group_id, assignment.user_id, state, f"User moved to Section {seat_index + 1}")


@router.delete("/occupants/{user_id}", response_model=SeatActionResponse)
async def move_to_waiting(
    group_id: str,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: SeatService = Depends(get_seat_service)
):
    """Move a member back to the waiting area (requires group owner or admin)"""
    state = service.move_to_waiting(group_id, current_user.id, user_id)
    return _action_response(group_id, user_id, state, "User has been moved to the waiting area")

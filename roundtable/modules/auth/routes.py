from fastapi import APIRouter, Depends
from roundtable.core.dependencies import get_current_user
from roundtable.modules.auth.schemas import CurrentUser

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUser)
async def me(current_user: CurrentUser = Depends(get_current_user)):
    """Get the authenticated user"""
    return current_user

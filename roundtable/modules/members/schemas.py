from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum

from roundtable.modules.seats.state import SeatState


class MemberRole(str, Enum):
    OWNER = "OWNER"
    SPEAKER = "SPEAKER"
    LISTENER = "LISTENER"


class VoiceAction(str, Enum):
    MUTE = "mute"
    UNMUTE = "unmute"
    DEAFEN = "deafen"
    UNDEAFEN = "undeafen"


VOICE_ACTION_UPDATES = {
    VoiceAction.MUTE: {"is_muted": True},
    VoiceAction.UNMUTE: {"is_muted": False},
    VoiceAction.DEAFEN: {"is_deafened": True},
    VoiceAction.UNDEAFEN: {"is_deafened": False},
}


class Profile(BaseModel):
    id: str
    username: str
    email: Optional[str] = None
    nationality: Optional[str] = None
    native_language: Optional[str] = None
    target_language: Optional[str] = None


class Membership(BaseModel):
    id: Optional[str] = None
    group_id: str
    user_id: str
    role: MemberRole = MemberRole.LISTENER
    seat_position: Optional[int] = None
    is_admin: bool = False
    is_muted: bool = False
    is_deafened: bool = False
    joined_at: datetime
    profile: Optional[Profile] = None

    @property
    def seat_state(self) -> SeatState:
        return SeatState.decode(self.seat_position)

    @property
    def is_owner(self) -> bool:
        return self.role == MemberRole.OWNER


class MemberResponse(BaseModel):
    id: Optional[str] = None
    group_id: str
    user_id: str
    role: MemberRole
    seat_position: Optional[int] = None
    is_admin: bool
    is_muted: bool
    is_deafened: bool
    joined_at: datetime
    profile: Optional[Profile] = None

    class Config:
        from_attributes = True


class VoiceControlRequest(BaseModel):
    action: VoiceAction


class VoiceControlResponse(BaseModel):
    user_id: str
    action: VoiceAction
    is_muted: bool
    is_deafened: bool

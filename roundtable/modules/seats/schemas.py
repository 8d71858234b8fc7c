from pydantic import BaseModel, model_serializer
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from roundtable.modules.members.schemas import MemberRole
from roundtable.modules.seats.state import SeatStatus


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class SeatedUser(CamelModel):
    id: str
    name: str
    role: MemberRole
    is_owner: bool = False
    is_admin: bool = False
    is_muted: bool = False
    nationality: str
    native_language: str
    target_language: str
    joined_at: datetime


class TableSeat(CamelModel):
    position: int
    user: Optional[SeatedUser] = None


class WaitingUser(CamelModel):
    id: str
    name: str
    role: MemberRole
    has_requested: bool
    requested_seat_position: Optional[int] = None
    requested_at: datetime
    joined_at: datetime
    nationality: str
    native_language: str
    target_language: str

    @model_serializer(mode="wrap")
    def _omit_missing_request(self, handler):
        # requestedSeatPosition is only present while a request is pending
        data = handler(self)
        if self.requested_seat_position is None:
            data.pop("requestedSeatPosition", None)
            data.pop("requested_seat_position", None)
        return data


class GroupOwner(CamelModel):
    id: str
    name: str
    nationality: str
    native_language: str
    target_language: str


class SeatGroup(CamelModel):
    id: str
    name: str
    language: str
    description: Optional[str] = None
    owner: GroupOwner


class SeatView(CamelModel):
    group_id: str
    group: SeatGroup
    member_count: int
    table_seats: List[TableSeat]
    waiting_users: List[WaitingUser]


class SeatApproval(CamelModel):
    seat_index: Optional[int] = None  # defaults to the requested seat


class SeatAssignment(CamelModel):
    user_id: str


class SeatActionResponse(CamelModel):
    group_id: str
    user_id: str
    status: SeatStatus
    seat: Optional[int] = None
    seat_position: Optional[int] = None
    message: str

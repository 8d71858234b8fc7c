"""
Seat state of a single membership.

group_members.seat_position stores three states in one signed integer:
null is unseated, 0..9 is a seat, and -(k + 1) is a pending request for seat k.
SeatState is the decoded form; nothing else in the codebase looks at the sign.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from roundtable.core.errors import ValidationError

SEAT_COUNT = 10


class SeatStatus(str, Enum):
    UNSEATED = "unseated"
    REQUESTING = "requesting"
    SEATED = "seated"


def validate_seat_index(seat_index: int) -> int:
    if isinstance(seat_index, bool) or not isinstance(seat_index, int):
        raise ValidationError("Seat index must be an integer")
    if not 0 <= seat_index < SEAT_COUNT:
        raise ValidationError(f"Invalid seat position: must be between 0 and {SEAT_COUNT - 1}")
    return seat_index


class SeatState(BaseModel):
    status: SeatStatus
    seat: Optional[int] = None

    class Config:
        frozen = True

    @classmethod
    def unseated(cls) -> "SeatState":
        return cls(status=SeatStatus.UNSEATED)

    @classmethod
    def requesting(cls, seat_index: int) -> "SeatState":
        return cls(status=SeatStatus.REQUESTING, seat=validate_seat_index(seat_index))

    @classmethod
    def seated(cls, seat_index: int) -> "SeatState":
        return cls(status=SeatStatus.SEATED, seat=validate_seat_index(seat_index))

    @classmethod
    def decode(cls, seat_position: Optional[int]) -> "SeatState":
        """Decode the stored seat_position column"""
        if seat_position is None:
            return cls.unseated()
        if seat_position >= 0:
            return cls.seated(seat_position)
        return cls.requesting(-seat_position - 1)

    def encode(self) -> Optional[int]:
        """Encode back into the seat_position column"""
        if self.status == SeatStatus.SEATED:
            return self.seat
        if self.status == SeatStatus.REQUESTING:
            return -(self.seat + 1)
        return None

    @property
    def is_seated(self) -> bool:
        return self.status == SeatStatus.SEATED

    @property
    def is_requesting(self) -> bool:
        return self.status == SeatStatus.REQUESTING

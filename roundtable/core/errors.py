"""
Typed failures raised by services.

Each error is an HTTPException so routes can let it propagate and FastAPI
renders it as {"detail": ...} with the matching status code.
"""

from fastapi import HTTPException, status


class ServiceError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Service error"

    def __init__(self, detail: str = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class PermissionDenied(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permissions"


class NotAMember(PermissionDenied):
    default_detail = "You are not a member of this group"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class SeatOccupied(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Seat is already occupied"


class InvalidTransition(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Action not allowed in the current state"


class StoreFailure(ServiceError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Database request failed"

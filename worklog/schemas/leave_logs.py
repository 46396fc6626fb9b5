from pydantic import BaseModel, field_validator
from typing import Optional, List


def _non_negative(v):
    if v is not None and v < 0:
        raise ValueError('Leave values cannot be negative')
    return v


# Request Schemas
class LeaveLogCreate(BaseModel):
    month: str
    earned_leave: Optional[int] = 0
    leave_allowed: Optional[int] = 0

    @field_validator('earned_leave', 'leave_allowed')
    @classmethod
    def validate_non_negative(cls, v):
        return _non_negative(v)


class LeaveLogUpdate(BaseModel):
    id: int
    earned_leave: Optional[int] = None
    leave_allowed: Optional[int] = None

    @field_validator('earned_leave', 'leave_allowed')
    @classmethod
    def validate_non_negative(cls, v):
        return _non_negative(v)


class LeaveLogDelete(BaseModel):
    id: int


# Response Schemas
class LeaveLogResponse(BaseModel):
    id: int
    month: str
    earned_leave: int
    leave_allowed: int
    leave_taken: int
    balance_leave: int

    @classmethod
    def from_model(cls, log) -> "LeaveLogResponse":
        return cls(
            id=log.ll_id,
            month=log.ll_month,
            earned_leave=log.ll_earned_leave,
            leave_allowed=log.ll_leave_allowed,
            leave_taken=log.ll_leave_taken,
            balance_leave=log.ll_balance_leave,
        )


class LeaveLogEnvelope(BaseModel):
    success: bool = True
    log: LeaveLogResponse


class LeaveLogListResponse(BaseModel):
    success: bool = True
    logs: List[LeaveLogResponse]

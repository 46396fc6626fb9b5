from pydantic import BaseModel, field_validator
from datetime import date
from typing import Optional, List
from enum import Enum


class SalaryAction(str, Enum):
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"
    REPLACE = "replace"


class SalaryRecord(BaseModel):
    effective_from: date
    amount: float
    position: Optional[str] = None

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        if v < 0:
            raise ValueError('Salary cannot be negative')
        return v


class SalaryHistoryChange(BaseModel):
    action: SalaryAction
    index: Optional[int] = None
    record: Optional[SalaryRecord] = None
    records: Optional[List[SalaryRecord]] = None


# Request Schemas
class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    salary_credited_day: Optional[int] = None
    leave_allowed_per_month: Optional[int] = None
    earned_leave: Optional[int] = None
    salary_history: Optional[SalaryHistoryChange] = None

    @field_validator('leave_allowed_per_month', 'earned_leave')
    @classmethod
    def validate_non_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError('Leave values cannot be negative')
        return v

    @field_validator('salary_credited_day')
    @classmethod
    def validate_credited_day(cls, v):
        if v is not None and not 1 <= v <= 31:
            raise ValueError('Salary credited day must be between 1 and 31')
        return v


# Response Schemas
class ProfileResponse(BaseModel):
    id: int
    email: str
    name: str = ""
    phone: str = ""
    department: str = ""
    designation: str = ""
    salary_history: List[SalaryRecord] = []
    salary_credited_day: int = 7
    leave_allowed_per_month: int = 0
    earned_leave: int = 0

    @classmethod
    def from_model(cls, user) -> "ProfileResponse":
        return cls(
            id=user.user_id,
            email=user.user_email,
            name=user.user_name or "",
            phone=user.user_phone or "",
            department=user.user_department or "",
            designation=user.user_designation or "",
            salary_history=[
                SalaryRecord(
                    effective_from=entry.sh_effective_from,
                    amount=entry.sh_amount,
                    position=entry.sh_position,
                )
                for entry in user.salary_history
            ],
            salary_credited_day=user.user_salary_credited_day,
            leave_allowed_per_month=user.user_leave_allowed_per_month or 0,
            earned_leave=user.user_earned_leave or 0,
        )


class ProfileEnvelope(BaseModel):
    success: bool = True
    user: ProfileResponse

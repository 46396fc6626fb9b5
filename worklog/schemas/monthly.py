from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict, Any
from worklog.schemas.daily_logs import DailyLogResponse


# Request Schemas
class MonthlySaveRequest(BaseModel):
    month: str

    @field_validator('month')
    @classmethod
    def validate_month(cls, v):
        if not v or not v.strip():
            raise ValueError('Month is required')
        return v.strip()


# Response Schemas
class MonthlySummary(BaseModel):
    month: str
    total_days: int
    weekend_count: int
    holiday_count: int
    leave_count: int
    absent_count: int
    present_count: int
    halfday_count: int
    working_days: int
    working_hour: str
    working_hour_decimal: float
    target_hour: int
    per_day_working: float
    leave_allowed_per_month: int
    earned_leave: int
    balance_leave: int


class MonthlySummaryResponse(BaseModel):
    success: bool = True
    summary: MonthlySummary
    records: List[DailyLogResponse]


class SavedMonthlyReport(BaseModel):
    id: int
    month: str
    summary: Dict[str, Any]
    saved_at: Optional[str] = None


class SavedMonthlyReportList(BaseModel):
    success: bool = True
    records: List[SavedMonthlyReport]

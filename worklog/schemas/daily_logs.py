from pydantic import BaseModel, field_validator
from typing import Optional, List
from enum import Enum


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    HOLIDAY = "Holiday"
    WEEKEND = "Weekend"
    WORK_FROM_HOME = "Work from Home"
    HALFDAY = "Halfday"


# Statuses that do not need times, standup or report
SPECIAL_ATTENDANCE = {
    AttendanceStatus.LEAVE,
    AttendanceStatus.HOLIDAY,
    AttendanceStatus.WEEKEND,
    AttendanceStatus.ABSENT,
}


# Request Schemas
class DailyLogCreate(BaseModel):
    date: str
    attendance: str
    in_time: Optional[str] = None
    out_time: Optional[str] = None
    standup: Optional[str] = None
    report: Optional[str] = None
    remarks: Optional[str] = None
    # Accepted for older clients; always recomputed from in/out time
    working_hour: Optional[str] = None

    @field_validator('remarks')
    @classmethod
    def strip_remarks(cls, v):
        return v.strip() if v else v


class DailyLogUpdate(BaseModel):
    id: int
    date: Optional[str] = None
    attendance: Optional[str] = None
    in_time: Optional[str] = None
    out_time: Optional[str] = None
    standup: Optional[str] = None
    report: Optional[str] = None
    remarks: Optional[str] = None
    working_hour: Optional[str] = None

    @field_validator('remarks')
    @classmethod
    def strip_remarks(cls, v):
        return v.strip() if v else v


class DailyLogDelete(BaseModel):
    id: int


# Response Schemas
class DailyLogResponse(BaseModel):
    id: int
    user_id: int
    date: str
    attendance: str
    in_time: Optional[str] = None
    out_time: Optional[str] = None
    working_hour: Optional[str] = None
    standup: Optional[str] = None
    report: Optional[str] = None
    remarks: Optional[str] = None

    @classmethod
    def from_model(cls, log) -> "DailyLogResponse":
        return cls(
            id=log.dl_id,
            user_id=log.dl_user_id,
            date=log.dl_date.isoformat(),
            attendance=log.dl_attendance,
            in_time=log.dl_in_time,
            out_time=log.dl_out_time,
            working_hour=log.dl_working_hour,
            standup=log.dl_standup,
            report=log.dl_report,
            remarks=log.dl_remarks,
        )


class DailyLogMutationResponse(BaseModel):
    success: bool = True
    message: str
    log: Optional[DailyLogResponse] = None
    earned_leave: Optional[int] = None


class DailyLogListResponse(BaseModel):
    success: bool = True
    records: List[DailyLogResponse]

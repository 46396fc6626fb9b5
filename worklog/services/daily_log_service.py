import logging
from datetime import date
from typing import Any, Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from worklog.core.exceptions import DuplicateError, NotFoundError, ValidationError
from worklog.repositories.daily_log_repo import DailyLogRepository
from worklog.schemas.daily_logs import (
    AttendanceStatus, SPECIAL_ATTENDANCE, DailyLogCreate, DailyLogUpdate, DailyLogResponse
)
from worklog.services.leave_accrual_service import LeaveAccrualService, user_lock
from worklog.utils.dates import month_of, parse_iso_date, parse_month
from worklog.utils.working_hours import compute_working_hour, ZERO_WORKING_HOUR

logger = logging.getLogger(__name__)

DUPLICATE_POLICIES = ("upsert", "reject")
EDITABLE_FIELDS = ("attendance", "in_time", "out_time", "standup", "report", "remarks")


def parse_attendance(value: Optional[str]) -> AttendanceStatus:
    try:
        return AttendanceStatus((value or "").strip())
    except ValueError:
        raise ValidationError(f"'{value}' is not a valid attendance status")


class DailyLogService:
    def __init__(self, daily_log_repo: DailyLogRepository,
                 accrual_service: LeaveAccrualService,
                 db: Session,
                 duplicate_policy: str = "upsert"):
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValidationError(f"Unknown duplicate policy: {duplicate_policy}")
        self.daily_log_repo = daily_log_repo
        self.accrual_service = accrual_service
        self.db = db
        self.duplicate_policy = duplicate_policy

    def normalize_fields(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate a full set of log fields and fill in derived values.

        Leave, Holiday, Weekend and Absent are stored as 00:00-00:00 with zero
        hours whatever times were sent or previously stored; missing notes
        become "N/A".  For other statuses the working hour is computed from
        in/out time, never taken from the client.
        """
        attendance = parse_attendance(fields.get("attendance"))
        in_time = (fields.get("in_time") or "").strip() or None
        out_time = (fields.get("out_time") or "").strip() or None
        standup = fields.get("standup") or None
        report = fields.get("report") or None

        if attendance in SPECIAL_ATTENDANCE:
            in_time = out_time = "00:00"
            working_hour = ZERO_WORKING_HOUR
            standup = standup or "N/A"
            report = report or "N/A"
        else:
            if not in_time or not out_time:
                raise ValidationError(f"In time and out time are required for {attendance.value}")
            if not standup:
                raise ValidationError("Standup is required for regular attendance")
            if not report:
                raise ValidationError("Report is required for regular attendance")
            working_hour = compute_working_hour(in_time, out_time)

        return {
            "attendance": attendance.value,
            "in_time": in_time,
            "out_time": out_time,
            "working_hour": working_hour,
            "standup": standup,
            "report": report,
            "remarks": fields.get("remarks"),
        }

    def create_log(self, user_id: int, request: DailyLogCreate) -> Tuple[DailyLogResponse, Optional[int]]:
        """Create the log for a date, or merge into the existing one under the upsert policy"""
        day = parse_iso_date(request.date)
        fields = self.normalize_fields(request.model_dump())
        if request.working_hour and request.working_hour != fields["working_hour"]:
            logger.debug(f"Ignoring client working hour {request.working_hour} for {day}, computed {fields['working_hour']}")

        with user_lock(user_id):
            try:
                existing = self.daily_log_repo.get_by_date(user_id, day)
                previous_attendance = existing.dl_attendance if existing else None
                if existing and self.duplicate_policy == "reject":
                    raise DuplicateError(f"Daily log for {day.isoformat()} already exists")

                if existing:
                    log = self.daily_log_repo.update(existing, fields)
                    logger.info(f"Merged daily log for user {user_id} on {day}")
                else:
                    log = self.daily_log_repo.create(user_id, day, fields)
                    logger.info(f"Created daily log for user {user_id} on {day}")

                months = self._months_to_recalculate((previous_attendance, day), (log.dl_attendance, day))
                earned = self._run_accrual(user_id, months)
                response = DailyLogResponse.from_model(log)
                self.db.commit()
                return response, earned
            except Exception:
                self.db.rollback()
                raise

    def list_logs(self, user_id: int, month: Optional[str] = None) -> List[DailyLogResponse]:
        if month:
            logs = self.daily_log_repo.find_month(user_id, month)
        else:
            logs = self.daily_log_repo.find(user_id)
        return [DailyLogResponse.from_model(log) for log in logs]

    def get_log_by_date(self, user_id: int, date_str: str) -> DailyLogResponse:
        day = parse_iso_date(date_str)
        log = self.daily_log_repo.get_by_date(user_id, day)
        if not log:
            raise NotFoundError(f"No daily log for {day.isoformat()}")
        return DailyLogResponse.from_model(log)

    def update_log(self, user_id: int, request: DailyLogUpdate) -> Tuple[DailyLogResponse, Optional[int]]:
        """Partially update the caller's own log and re-run accrual if Leave is involved"""
        changes = request.model_dump(exclude_unset=True)
        changes.pop("id", None)
        changes.pop("working_hour", None)
        new_day = parse_iso_date(changes.pop("date")) if changes.get("date") else None

        with user_lock(user_id):
            try:
                log = self.daily_log_repo.get_by_id(request.id, user_id)
                if not log:
                    raise NotFoundError("Report not found or unauthorized.")

                old_attendance, old_day = log.dl_attendance, log.dl_date
                merged = {field: getattr(log, f"dl_{field}") for field in EDITABLE_FIELDS}
                merged.update(changes)
                fields = self.normalize_fields(merged)

                log = self.daily_log_repo.update(log, fields, day=new_day)
                logger.info(f"Updated daily log {log.dl_id} for user {user_id}")

                months = self._months_to_recalculate((old_attendance, old_day), (log.dl_attendance, log.dl_date))
                earned = self._run_accrual(user_id, months)
                response = DailyLogResponse.from_model(log)
                self.db.commit()
                return response, earned
            except Exception:
                self.db.rollback()
                raise

    def delete_log(self, user_id: int, log_id: int) -> Optional[int]:
        with user_lock(user_id):
            try:
                log = self.daily_log_repo.delete(log_id, user_id)
                if not log:
                    raise NotFoundError("Report not found or unauthorized.")
                logger.info(f"Deleted daily log {log_id} for user {user_id}")

                months = self._months_to_recalculate((log.dl_attendance, log.dl_date), (None, None))
                earned = self._run_accrual(user_id, months)
                self.db.commit()
                return earned
            except Exception:
                self.db.rollback()
                raise

    def on_leave_record_changed(self, user_id: int, month: str) -> Optional[int]:
        """Recalculate earned leave for a month and commit"""
        parse_month(month)
        with user_lock(user_id):
            try:
                earned = self.accrual_service.on_leave_record_changed(user_id, month)
                self.db.commit()
                return earned
            except Exception:
                self.db.rollback()
                raise

    @staticmethod
    def _months_to_recalculate(before: Tuple[Optional[str], Optional[date]],
                               after: Tuple[Optional[str], Optional[date]]) -> List[str]:
        """Months whose Leave count may have changed, given (attendance, date) before and after"""
        months: Set[str] = set()
        for attendance, day in (before, after):
            if attendance == AttendanceStatus.LEAVE.value and day is not None:
                months.add(month_of(day))
        return sorted(months)

    def _run_accrual(self, user_id: int, months: List[str]) -> Optional[int]:
        earned = None
        for month in months:
            earned = self.accrual_service.on_leave_record_changed(user_id, month)
        return earned

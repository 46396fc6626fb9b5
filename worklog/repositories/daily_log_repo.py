import logging
from typing import List, Optional, Dict, Any
from datetime import date
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from worklog.core.exceptions import DuplicateError, RepositoryError
from worklog.models import DailyLog
from worklog.utils.dates import month_bounds

logger = logging.getLogger(__name__)

# Payload keys -> DailyLog columns
LOG_COL_MAP = {
    "attendance": "dl_attendance",
    "in_time": "dl_in_time",
    "out_time": "dl_out_time",
    "working_hour": "dl_working_hour",
    "standup": "dl_standup",
    "report": "dl_report",
    "remarks": "dl_remarks",
}


class DailyLogRepository:
    """
    Daily attendance rows, one per (user, date).

    Writes are flushed, not committed: the calling service owns the
    transaction so the log write and the leave accrual commit together.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, log_id: int, user_id: int) -> Optional[DailyLog]:
        """Get a log owned by the user"""
        try:
            return self.db.query(DailyLog).filter(
                DailyLog.dl_id == log_id,
                DailyLog.dl_user_id == user_id
            ).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching daily log {log_id}: {str(e)}")

    def get_by_date(self, user_id: int, day: date) -> Optional[DailyLog]:
        try:
            return self.db.query(DailyLog).filter(
                DailyLog.dl_user_id == user_id,
                DailyLog.dl_date == day
            ).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching daily log for {day}: {str(e)}")

    def find(self, user_id: int, start: Optional[date] = None, end: Optional[date] = None) -> List[DailyLog]:
        """Logs for a user, optionally within an inclusive date range, newest first"""
        try:
            query = self.db.query(DailyLog).filter(DailyLog.dl_user_id == user_id)
            if start:
                query = query.filter(DailyLog.dl_date >= start)
            if end:
                query = query.filter(DailyLog.dl_date <= end)
            return query.order_by(DailyLog.dl_date.desc()).all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching daily logs: {str(e)}")

    def find_month(self, user_id: int, month: str) -> List[DailyLog]:
        first, last = month_bounds(month)
        return self.find(user_id, first, last)

    def count_where(self, user_id: int, month: str, attendance: str) -> int:
        """Number of logs in a YYYY-MM month with the given attendance status"""
        first, last = month_bounds(month)
        try:
            return self.db.query(func.count(DailyLog.dl_id)).filter(
                DailyLog.dl_user_id == user_id,
                DailyLog.dl_attendance == attendance,
                DailyLog.dl_date >= first,
                DailyLog.dl_date <= last
            ).scalar() or 0
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while counting {attendance} logs: {str(e)}")

    def create(self, user_id: int, day: date, fields: Dict[str, Any]) -> DailyLog:
        try:
            log = DailyLog(dl_user_id=user_id, dl_date=day)
            self._apply(log, fields)
            self.db.add(log)
            self.db.flush()
            self.db.refresh(log)
            return log
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError(f"Daily log for {day} already exists")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create daily log for user {user_id} on {day}: {e}")
            raise RepositoryError(f"Database error while creating daily log: {str(e)}")

    def update(self, log: DailyLog, fields: Dict[str, Any], day: Optional[date] = None) -> DailyLog:
        try:
            if day is not None:
                log.dl_date = day
            self._apply(log, fields)
            self.db.flush()
            self.db.refresh(log)
            return log
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError(f"Daily log for {day} already exists")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update daily log {log.dl_id}: {e}")
            raise RepositoryError(f"Database error while updating daily log: {str(e)}")

    def delete(self, log_id: int, user_id: int) -> Optional[DailyLog]:
        """Delete a log owned by the user; returns the deleted row or None"""
        try:
            log = self.get_by_id(log_id, user_id)
            if not log:
                return None
            self.db.delete(log)
            self.db.flush()
            return log
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete daily log {log_id}: {e}")
            raise RepositoryError(f"Database error while deleting daily log: {str(e)}")

    @staticmethod
    def _apply(log: DailyLog, fields: Dict[str, Any]) -> None:
        for key, value in fields.items():
            column_name = LOG_COL_MAP.get(key)
            if column_name:
                setattr(log, column_name, value)

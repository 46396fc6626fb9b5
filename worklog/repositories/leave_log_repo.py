from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from worklog.core.exceptions import DuplicateError, RepositoryError
from worklog.models import LeaveLog


class LeaveLogRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, log_id: int, user_id: int) -> Optional[LeaveLog]:
        try:
            return self.db.query(LeaveLog).filter(
                LeaveLog.ll_id == log_id,
                LeaveLog.ll_user_id == user_id
            ).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching leave log: {str(e)}")

    def get_by_month(self, user_id: int, month: str) -> Optional[LeaveLog]:
        try:
            return self.db.query(LeaveLog).filter(
                LeaveLog.ll_user_id == user_id,
                LeaveLog.ll_month == month
            ).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching leave log: {str(e)}")

    def list(self, user_id: int) -> List[LeaveLog]:
        """Leave logs for a user, newest month first"""
        try:
            return self.db.query(LeaveLog).filter(
                LeaveLog.ll_user_id == user_id
            ).order_by(LeaveLog.ll_month.desc()).all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching leave logs: {str(e)}")

    def create(self, user_id: int, month: str, earned_leave: int, leave_allowed: int) -> LeaveLog:
        try:
            log = LeaveLog(
                ll_user_id=user_id,
                ll_month=month,
                ll_earned_leave=earned_leave,
                ll_leave_allowed=leave_allowed,
                ll_leave_taken=0,
                ll_balance_leave=earned_leave + leave_allowed,
            )
            self.db.add(log)
            self.db.commit()
            self.db.refresh(log)
            return log
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError("Leave log for this month already exists")
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while creating leave log: {str(e)}")

    def update(self, log: LeaveLog, earned_leave: Optional[int], leave_allowed: Optional[int]) -> LeaveLog:
        try:
            if earned_leave is not None:
                log.ll_earned_leave = earned_leave
            if leave_allowed is not None:
                log.ll_leave_allowed = leave_allowed
            log.ll_balance_leave = (log.ll_earned_leave or 0) + (log.ll_leave_allowed or 0) - (log.ll_leave_taken or 0)
            self.db.commit()
            self.db.refresh(log)
            return log
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while updating leave log: {str(e)}")

    def delete(self, log: LeaveLog) -> None:
        try:
            self.db.delete(log)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while deleting leave log: {str(e)}")

from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from worklog.core.exceptions import RepositoryError
from worklog.models import LeaveAccrual


class LeaveAccrualRepository:
    """Per-month accrual ledger; writes are flushed only, the calling service commits"""

    def __init__(self, db: Session):
        self.db = db

    def list(self, user_id: int) -> List[LeaveAccrual]:
        """Accrued months for a user, oldest first"""
        try:
            return self.db.query(LeaveAccrual).filter(
                LeaveAccrual.la_user_id == user_id
            ).order_by(LeaveAccrual.la_month.asc()).all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching leave accruals: {str(e)}")

    def save(self, user_id: int, month: str, opening: int, leave_allowed: int,
             leaves_taken: int, closing: int, entry: Optional[LeaveAccrual] = None) -> LeaveAccrual:
        """Update the given month entry, or add one when there is none yet"""
        try:
            if entry is None:
                entry = LeaveAccrual(la_user_id=user_id, la_month=month)
                self.db.add(entry)
            entry.la_opening = opening
            entry.la_leave_allowed = leave_allowed
            entry.la_leaves_taken = leaves_taken
            entry.la_closing = closing
            self.db.flush()
            return entry
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while saving leave accrual for {month}: {str(e)}")

    def clear(self, user_id: int) -> int:
        """Drop every accrued month so the next accrual opens from the current balance"""
        try:
            return self.db.query(LeaveAccrual).filter(
                LeaveAccrual.la_user_id == user_id
            ).delete(synchronize_session=False)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while clearing leave accruals: {str(e)}")

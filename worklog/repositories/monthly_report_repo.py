from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from worklog.core.exceptions import RepositoryError
from worklog.models import MonthlyReport


class MonthlyReportRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int, month: str) -> Optional[MonthlyReport]:
        try:
            return self.db.query(MonthlyReport).filter(
                MonthlyReport.mr_user_id == user_id,
                MonthlyReport.mr_month == month
            ).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching monthly report: {str(e)}")

    def list(self, user_id: int, month: Optional[str] = None) -> List[MonthlyReport]:
        """Saved reports, newest month first"""
        try:
            query = self.db.query(MonthlyReport).filter(MonthlyReport.mr_user_id == user_id)
            if month:
                query = query.filter(MonthlyReport.mr_month == month)
            return query.order_by(MonthlyReport.mr_month.desc()).all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching monthly reports: {str(e)}")

    def upsert(self, user_id: int, month: str, summary: Dict[str, Any]) -> MonthlyReport:
        try:
            report = self.get(user_id, month)
            if report:
                report.mr_summary = summary
            else:
                report = MonthlyReport(mr_user_id=user_id, mr_month=month, mr_summary=summary)
                self.db.add(report)
            self.db.commit()
            self.db.refresh(report)
            return report
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while saving monthly report: {str(e)}")

import logging
from typing import List

from worklog.core.exceptions import DuplicateError, NotFoundError
from worklog.repositories.leave_log_repo import LeaveLogRepository
from worklog.schemas.leave_logs import LeaveLogCreate, LeaveLogResponse, LeaveLogUpdate
from worklog.utils.dates import parse_month

logger = logging.getLogger(__name__)


class LeaveLogService:
    """Manually maintained per-month leave ledger, independent of the accrual engine"""

    def __init__(self, leave_log_repo: LeaveLogRepository):
        self.leave_log_repo = leave_log_repo

    def list_logs(self, user_id: int) -> List[LeaveLogResponse]:
        return [LeaveLogResponse.from_model(log) for log in self.leave_log_repo.list(user_id)]

    def create_log(self, user_id: int, request: LeaveLogCreate) -> LeaveLogResponse:
        month = (request.month or "").strip()
        parse_month(month)
        if self.leave_log_repo.get_by_month(user_id, month):
            raise DuplicateError("Leave log for this month already exists")
        log = self.leave_log_repo.create(
            user_id,
            month,
            earned_leave=request.earned_leave or 0,
            leave_allowed=request.leave_allowed or 0,
        )
        logger.info(f"Created leave log {log.ll_id} for user {user_id} month {month}")
        return LeaveLogResponse.from_model(log)

    def update_log(self, user_id: int, request: LeaveLogUpdate) -> LeaveLogResponse:
        log = self.leave_log_repo.get_by_id(request.id, user_id)
        if not log:
            raise NotFoundError("Leave log not found")
        log = self.leave_log_repo.update(log, request.earned_leave, request.leave_allowed)
        return LeaveLogResponse.from_model(log)

    def delete_log(self, user_id: int, log_id: int) -> None:
        log = self.leave_log_repo.get_by_id(log_id, user_id)
        if not log:
            raise NotFoundError("Leave log not found")
        self.leave_log_repo.delete(log)
        logger.info(f"Deleted leave log {log_id} for user {user_id}")

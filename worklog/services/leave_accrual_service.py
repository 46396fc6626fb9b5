import logging
import threading
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy.orm import Session

from worklog.core.exceptions import NotFoundError
from worklog.models import LeaveAccrual, User
from worklog.repositories.daily_log_repo import DailyLogRepository
from worklog.repositories.leave_accrual_repo import LeaveAccrualRepository
from worklog.repositories.user_repo import UserRepository
from worklog.schemas.daily_logs import AttendanceStatus
from worklog.services.leave_policy import LeaveComputation, LeavePolicy
from worklog.utils.dates import parse_month

logger = logging.getLogger(__name__)

LOCK_STRIPES = 64
_user_locks = tuple(threading.RLock() for _ in range(LOCK_STRIPES))


def lock_for(user_id: int) -> threading.RLock:
    """Users share a fixed pool of locks, so memory stays bounded however many users exist"""
    return _user_locks[user_id % LOCK_STRIPES]


@contextmanager
def user_lock(user_id: int):
    """
    Serialise earned-leave read-modify-write per user within this process.

    Sync routes run in a thread pool, so two requests for the same user can
    otherwise both read the old balance and one update is lost.  Hold the
    lock until the transaction is committed.
    """
    with lock_for(user_id):
        yield


class LeaveAccrualService:
    """
    Applies the leave policy month by month.

    Every accrued month is kept in the accrual ledger with the balance it
    opened with and closed at.  A month opens from the closing balance of
    the accrued month before it, so recalculating a month also replays
    every later accrued month and the profile always holds the closing
    balance of the latest one.  Repeating a recalculation without log
    changes therefore leaves the balance unchanged, in any month order.
    """

    def __init__(self, daily_log_repo: DailyLogRepository,
                 user_repo: UserRepository,
                 leave_accrual_repo: LeaveAccrualRepository,
                 policy: LeavePolicy,
                 db: Session):
        self.daily_log_repo = daily_log_repo
        self.user_repo = user_repo
        self.leave_accrual_repo = leave_accrual_repo
        self.policy = policy
        self.db = db

    def _get_user(self, user_id: int) -> User:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def opening_balance(user: User, month: str, entries: List[LeaveAccrual]) -> int:
        """Earned leave the month starts from, given the ledger ordered oldest first"""
        earlier = [entry for entry in entries if entry.la_month < month]
        if earlier:
            return earlier[-1].la_closing
        if entries:
            # The month is the first accrued one or comes before all of them
            return entries[0].la_opening
        return user.user_earned_leave or 0

    def _apply(self, user_id: int, month: str, opening: int, allowed: int) -> LeaveComputation:
        leaves_this_month = self.daily_log_repo.count_where(user_id, month, AttendanceStatus.LEAVE.value)
        return self.policy.compute(earned=opening, allowed=allowed, leaves_taken=leaves_this_month)

    def compute(self, user_id: int, month: str) -> LeaveComputation:
        """Apply the leave policy for a YYYY-MM month without storing anything"""
        parse_month(month)
        user = self._get_user(user_id)
        entries = self.leave_accrual_repo.list(user_id)
        entry = next((e for e in entries if e.la_month == month), None)
        allowed = entry.la_leave_allowed if entry else user.user_leave_allowed_per_month
        return self._apply(user_id, month, self.opening_balance(user, month, entries), allowed)

    def recalculate(self, user_id: int, month: str) -> int:
        """Recompute the month and every later accrued month, store the new balance; the caller commits"""
        parse_month(month)
        with user_lock(user_id):
            user = self._get_user(user_id)
            entries = self.leave_accrual_repo.list(user_id)
            entry = next((e for e in entries if e.la_month == month), None)
            allowed = entry.la_leave_allowed if entry else user.user_leave_allowed_per_month

            result = self._apply(user_id, month, self.opening_balance(user, month, entries), allowed)
            self._record(user_id, month, result, entry)
            closing = result.earned_leave

            for later in entries:
                if later.la_month <= month:
                    continue
                replayed = self._apply(user_id, later.la_month, closing, later.la_leave_allowed)
                self._record(user_id, later.la_month, replayed, later)
                closing = replayed.earned_leave

            self.user_repo.set_earned_leave(user_id, closing)
            logger.info(
                f"Leave accrual ({self.policy.name}) user={user_id} month={month} "
                f"leaves={result.leaves_taken} allowed={result.leave_allowed} "
                f"opening {result.previous_earned} -> {result.earned_leave}, balance now {closing}"
            )
            return closing

    def _record(self, user_id: int, month: str, result: LeaveComputation,
                entry: Optional[LeaveAccrual]) -> LeaveAccrual:
        return self.leave_accrual_repo.save(
            user_id,
            month,
            opening=result.previous_earned,
            leave_allowed=result.leave_allowed,
            leaves_taken=result.leaves_taken,
            closing=result.earned_leave,
            entry=entry,
        )

    def on_leave_record_changed(self, user_id: int, month: str) -> Optional[int]:
        """
        Best-effort accrual after a Leave record was added, edited or removed.

        A missing profile is logged and skipped so the log write itself still
        succeeds; database errors propagate and roll back the request.
        """
        try:
            return self.recalculate(user_id, month)
        except NotFoundError as e:
            logger.warning(f"Skipping leave accrual for user {user_id} month {month}: {e.message}")
            return None

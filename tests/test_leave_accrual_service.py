import threading
from datetime import date

from worklog.repositories.leave_accrual_repo import LeaveAccrualRepository
from worklog.repositories.user_repo import UserRepository
from worklog.schemas.profile import ProfileUpdate
from worklog.services.leave_accrual_service import LOCK_STRIPES, lock_for, user_lock
from worklog.services.profile_service import ProfileService


def _leaves(add_log, user_id, *days):
    for day in days:
        add_log(user_id, day, attendance="Leave")


def test_ceiling_recalculation(db, make_user, add_log, accrual_service_factory):
    user = make_user(leave_allowed=2, earned=5)
    _leaves(add_log, user.user_id, date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5))

    earned = accrual_service_factory("ceiling").recalculate(user.user_id, "2025-03")

    assert earned == 4
    db.commit()
    assert UserRepository(db).get_by_id(user.user_id).user_earned_leave == 4


def test_recalculating_twice_gives_same_result(db, make_user, add_log, accrual_service_factory):
    user = make_user(leave_allowed=2, earned=5)
    _leaves(add_log, user.user_id, date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5))
    service = accrual_service_factory("ceiling")

    first = service.on_leave_record_changed(user.user_id, "2025-03")
    db.commit()
    second = service.on_leave_record_changed(user.user_id, "2025-03")

    assert first == second == 4


def test_carry_forward_across_months(db, make_user, add_log, accrual_service_factory):
    user = make_user(leave_allowed=2, earned=0)
    service = accrual_service_factory("carry_forward")

    assert service.recalculate(user.user_id, "2025-01") == 2
    # Banking is not repeated for the same month
    assert service.recalculate(user.user_id, "2025-01") == 2
    db.commit()

    _leaves(add_log, user.user_id, date(2025, 2, 3), date(2025, 2, 4), date(2025, 2, 5))
    assert service.recalculate(user.user_id, "2025-02") == 0


def test_manual_balance_edit_reopens_month(db, make_user, add_log, accrual_service_factory):
    user = make_user(leave_allowed=2, earned=5)
    _leaves(add_log, user.user_id, date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5))
    service = accrual_service_factory("ceiling")
    service.recalculate(user.user_id, "2025-03")
    db.commit()

    ProfileService(UserRepository(db), LeaveAccrualRepository(db)).update_profile(
        user.user_id, ProfileUpdate(earned_leave=10)
    )

    assert LeaveAccrualRepository(db).list(user.user_id) == []
    assert service.recalculate(user.user_id, "2025-03") == 9


def test_compute_without_persist_leaves_profile_untouched(db, make_user, add_log, accrual_service_factory):
    user = make_user(leave_allowed=0, earned=3)
    _leaves(add_log, user.user_id, date(2025, 3, 3))

    result = accrual_service_factory().compute(user.user_id, "2025-03")

    assert result.earned_leave == 2
    assert result.leaves_taken == 1
    db.expire_all()
    assert UserRepository(db).get_by_id(user.user_id).user_earned_leave == 3


def test_missing_user_is_skipped(accrual_service_factory):
    assert accrual_service_factory().on_leave_record_changed(999, "2025-03") is None


def test_earlier_month_replays_later_months(db, make_user, add_log, accrual_service_factory):
    user = make_user(leave_allowed=0, earned=5)
    service = accrual_service_factory("ceiling")

    add_log(user.user_id, date(2025, 2, 10), attendance="Leave")
    assert service.recalculate(user.user_id, "2025-02") == 4

    add_log(user.user_id, date(2025, 1, 10), attendance="Leave")
    assert service.recalculate(user.user_id, "2025-01") == 3
    db.commit()

    # February again: opens from January's closing, not from the original balance
    assert service.recalculate(user.user_id, "2025-02") == 3
    db.commit()

    ledger = [(e.la_month, e.la_opening, e.la_closing) for e in LeaveAccrualRepository(db).list(user.user_id)]
    assert ledger == [("2025-01", 5, 4), ("2025-02", 4, 3)]
    assert UserRepository(db).get_by_id(user.user_id).user_earned_leave == 3


def test_compute_uses_ledger_opening(db, make_user, add_log, accrual_service_factory):
    user = make_user(leave_allowed=0, earned=5)
    service = accrual_service_factory("ceiling")
    add_log(user.user_id, date(2025, 2, 10), attendance="Leave")
    service.recalculate(user.user_id, "2025-02")
    db.commit()

    result = service.compute(user.user_id, "2025-02")

    assert result.previous_earned == 5
    assert result.earned_leave == 4


def test_user_locks_are_striped():
    assert lock_for(1) is lock_for(1 + LOCK_STRIPES)
    assert lock_for(1) is not lock_for(2)


def test_striped_lock_is_reentrant_across_users():
    done = threading.Event()

    def _nested():
        with user_lock(1):
            with user_lock(1 + LOCK_STRIPES):
                done.set()

    worker = threading.Thread(target=_nested)
    worker.start()
    worker.join(timeout=2)

    assert done.is_set()

from datetime import date

import pytest

from worklog.core.exceptions import NotFoundError, ValidationError
from worklog.repositories.daily_log_repo import DailyLogRepository
from worklog.repositories.leave_accrual_repo import LeaveAccrualRepository
from worklog.repositories.monthly_report_repo import MonthlyReportRepository
from worklog.repositories.user_repo import UserRepository
from worklog.services.monthly_service import MonthlyService


@pytest.fixture
def monthly_service_factory(db, accrual_service_factory):
    def _build(weekend_strategy="sundays"):
        return MonthlyService(
            DailyLogRepository(db),
            MonthlyReportRepository(db),
            accrual_service_factory("ceiling"),
            weekend_strategy=weekend_strategy,
            standard_working_hours=9,
        )
    return _build


@pytest.fixture
def april(make_user, add_log):
    """2025-04: two worked days, one holiday, two leaves"""
    user = make_user(leave_allowed=2, earned=5)
    add_log(user.user_id, date(2025, 4, 1), working_hour="8.30", in_time="09:00", out_time="17:30")
    add_log(user.user_id, date(2025, 4, 2), working_hour="9.15", in_time="09:30", out_time="18:45")
    add_log(user.user_id, date(2025, 4, 18), attendance="Holiday")
    add_log(user.user_id, date(2025, 4, 7), attendance="Leave")
    add_log(user.user_id, date(2025, 4, 8), attendance="Leave")
    return user


def test_april_summary(april, monthly_service_factory):
    summary, records = monthly_service_factory().summarize(april.user_id, "2025-04")

    assert summary.total_days == 30
    assert summary.weekend_count == 4
    assert summary.holiday_count == 1
    assert summary.leave_count == 2
    assert summary.working_days == 23
    assert summary.target_hour == 207
    assert summary.working_hour == "17.45"
    assert summary.working_hour_decimal == 17.75
    assert summary.per_day_working == round(17.75 / 23, 2)
    assert summary.present_count == 2
    assert len(records) == 5


def test_summary_derives_leave_without_persisting(db, april, monthly_service_factory):
    summary, _ = monthly_service_factory().summarize(april.user_id, "2025-04")

    assert summary.earned_leave == 5
    assert summary.balance_leave == 5
    db.expire_all()
    assert LeaveAccrualRepository(db).list(april.user_id) == []
    assert UserRepository(db).get_by_id(april.user_id).user_earned_leave == 5


def test_weekends_from_records(april, add_log, monthly_service_factory):
    add_log(april.user_id, date(2025, 4, 6), attendance="Weekend")

    summary, _ = monthly_service_factory("records").summarize(april.user_id, "2025-04")

    assert summary.weekend_count == 1
    assert summary.working_days == 26


def test_legacy_working_hour_skipped(april, add_log, monthly_service_factory):
    add_log(april.user_id, date(2025, 4, 3), working_hour="9.75", in_time="09:00", out_time="18:45")

    summary, _ = monthly_service_factory().summarize(april.user_id, "2025-04")

    assert summary.working_hour == "17.45"


def test_empty_month_has_no_per_day_average(make_user, monthly_service_factory):
    user = make_user()
    summary, records = monthly_service_factory().summarize(user.user_id, "2025-02")

    assert records == []
    assert summary.working_days == 24
    assert summary.per_day_working == 0


def test_invalid_month(make_user, monthly_service_factory):
    user = make_user()
    with pytest.raises(ValidationError):
        monthly_service_factory().summarize(user.user_id, "2025/04")


def test_unknown_weekend_strategy(monthly_service_factory):
    with pytest.raises(ValidationError):
        monthly_service_factory("saturdays")


def test_save_replaces_snapshot(april, monthly_service_factory):
    service = monthly_service_factory()
    service.save_summary(april.user_id, "2025-04")
    saved = service.save_summary(april.user_id, "2025-04")

    listed = service.list_saved(april.user_id)
    assert len(listed) == 1
    assert listed[0].id == saved.id
    assert listed[0].summary["working_days"] == 23


def test_export_month_workbook(april, monthly_service_factory):
    content = monthly_service_factory().export_month(april.user_id, "2025-04")

    assert content[:2] == b"PK"


def test_export_empty_month(make_user, monthly_service_factory):
    user = make_user()
    with pytest.raises(NotFoundError):
        monthly_service_factory().export_month(user.user_id, "2025-04")

from datetime import date

import pytest

from worklog.core.exceptions import DuplicateError, NotFoundError, ValidationError
from worklog.repositories.daily_log_repo import DailyLogRepository
from worklog.repositories.monthly_report_repo import MonthlyReportRepository
from worklog.repositories.user_repo import UserRepository
from worklog.schemas.daily_logs import DailyLogCreate, DailyLogUpdate
from worklog.services.monthly_service import MonthlyService


def _present(day, **overrides):
    payload = {
        "date": day,
        "attendance": "Present",
        "in_time": "09:00",
        "out_time": "17:30",
        "standup": "Sync with team",
        "report": "Closed two tickets",
    }
    payload.update(overrides)
    return DailyLogCreate(**payload)


def _leave(day):
    return DailyLogCreate(date=day, attendance="Leave")


def test_working_hour_is_computed_not_trusted(make_user, daily_log_service_factory):
    user = make_user()
    log, earned = daily_log_service_factory().create_log(user.user_id, _present("2025-04-01", working_hour="12.00"))

    assert log.working_hour == "8.30"
    assert log.date == "2025-04-01"
    assert earned is None


def test_special_status_gets_defaults(make_user, daily_log_service_factory):
    user = make_user()
    log, _ = daily_log_service_factory().create_log(user.user_id, DailyLogCreate(date="2025-04-18", attendance="Holiday"))

    assert (log.in_time, log.out_time, log.working_hour) == ("00:00", "00:00", "0.00")
    assert log.standup == "N/A"
    assert log.report == "N/A"


@pytest.mark.parametrize("overrides", [
    {"standup": ""},
    {"report": None},
    {"in_time": None},
    {"out_time": "7pm"},
    {"attendance": "Vacation"},
    {"date": "01/04/2025"},
])
def test_invalid_payloads_rejected(make_user, daily_log_service_factory, overrides):
    user = make_user()
    with pytest.raises(ValidationError):
        daily_log_service_factory().create_log(user.user_id, _present("2025-04-01", **overrides))


def test_duplicate_date_upserts(make_user, daily_log_service_factory):
    user = make_user()
    service = daily_log_service_factory(duplicate_policy="upsert")
    first, _ = service.create_log(user.user_id, _present("2025-04-01"))
    second, _ = service.create_log(user.user_id, _present("2025-04-01", attendance="Work from Home", out_time="18:00"))

    assert second.id == first.id
    assert second.attendance == "Work from Home"
    assert second.working_hour == "9.00"
    assert len(service.list_logs(user.user_id)) == 1


def test_duplicate_date_rejected(make_user, daily_log_service_factory):
    user = make_user()
    service = daily_log_service_factory(duplicate_policy="reject")
    service.create_log(user.user_id, _present("2025-04-01"))

    with pytest.raises(DuplicateError):
        service.create_log(user.user_id, _present("2025-04-01"))
    assert len(service.list_logs(user.user_id)) == 1


def test_unknown_duplicate_policy(daily_log_service_factory):
    with pytest.raises(ValidationError):
        daily_log_service_factory(duplicate_policy="ignore")


def test_leave_triggers_accrual_for_record_month(db, make_user, daily_log_service_factory):
    user = make_user(leave_allowed=0, earned=3)
    _, earned = daily_log_service_factory().create_log(user.user_id, _leave("2025-01-15"))

    assert earned == 2
    assert UserRepository(db).get_by_id(user.user_id).user_earned_leave == 2


def test_moving_leave_to_another_month_recalculates_both(make_user, daily_log_service_factory):
    user = make_user(leave_allowed=1, earned=5)
    service = daily_log_service_factory()
    service.create_log(user.user_id, _leave("2025-01-10"))
    second, earned = service.create_log(user.user_id, _leave("2025-01-11"))
    assert earned == 4

    moved, earned = service.update_log(user.user_id, DailyLogUpdate(id=second.id, date="2025-02-03"))

    assert moved.date == "2025-02-03"
    assert earned == 5


def test_update_merges_existing_fields(make_user, daily_log_service_factory):
    user = make_user()
    service = daily_log_service_factory()
    log, _ = service.create_log(user.user_id, _present("2025-04-01"))

    updated, _ = service.update_log(user.user_id, DailyLogUpdate(id=log.id, out_time="18:15", remarks="  late call  "))

    assert updated.working_hour == "9.15"
    assert updated.remarks == "late call"
    assert updated.standup == "Sync with team"


def test_update_onto_taken_date_is_duplicate(make_user, daily_log_service_factory):
    user = make_user()
    service = daily_log_service_factory()
    service.create_log(user.user_id, _present("2025-04-01"))
    other, _ = service.create_log(user.user_id, _present("2025-04-02"))

    with pytest.raises(DuplicateError):
        service.update_log(user.user_id, DailyLogUpdate(id=other.id, date="2025-04-01"))


def test_cannot_touch_another_users_log(make_user, daily_log_service_factory):
    owner = make_user("owner@example.com")
    intruder = make_user("intruder@example.com")
    service = daily_log_service_factory()
    log, _ = service.create_log(owner.user_id, _present("2025-04-01"))

    with pytest.raises(NotFoundError):
        service.update_log(intruder.user_id, DailyLogUpdate(id=log.id, remarks="mine now"))
    with pytest.raises(NotFoundError):
        service.delete_log(intruder.user_id, log.id)


def test_deleting_leave_restores_balance(make_user, daily_log_service_factory):
    user = make_user(leave_allowed=0, earned=2)
    service = daily_log_service_factory()
    log, earned = service.create_log(user.user_id, _leave("2025-03-05"))
    assert earned == 1

    assert service.delete_log(user.user_id, log.id) == 2
    with pytest.raises(NotFoundError):
        service.get_log_by_date(user.user_id, "2025-03-05")


def test_list_logs_by_month_newest_first(make_user, daily_log_service_factory):
    user = make_user()
    service = daily_log_service_factory()
    for day in ("2025-04-01", "2025-04-02", "2025-05-01"):
        service.create_log(user.user_id, _present(day))

    april = service.list_logs(user.user_id, "2025-04")

    assert [log.date for log in april] == ["2025-04-02", "2025-04-01"]
    assert len(service.list_logs(user.user_id)) == 3


def test_on_leave_record_changed_commits(db, make_user, add_log, daily_log_service_factory):
    user = make_user(leave_allowed=1, earned=4)
    for day in (3, 4, 5):
        add_log(user.user_id, date(2025, 6, day), attendance="Leave")
    service = daily_log_service_factory()

    assert service.on_leave_record_changed(user.user_id, "2025-06") == 2
    db.expire_all()
    assert UserRepository(db).get_by_id(user.user_id).user_earned_leave == 2
    assert service.on_leave_record_changed(user.user_id, "2025-06") == 2


def test_leave_with_one_time_has_no_hours(make_user, daily_log_service_factory):
    user = make_user()
    log, _ = daily_log_service_factory().create_log(
        user.user_id, DailyLogCreate(date="2025-04-07", attendance="Leave", in_time="09:00")
    )

    assert (log.in_time, log.out_time, log.working_hour) == ("00:00", "00:00", "0.00")


def test_present_changed_to_leave_drops_hours(db, make_user, daily_log_service_factory):
    user = make_user()
    service = daily_log_service_factory()
    log, _ = service.create_log(user.user_id, _present("2025-04-01"))

    updated, _ = service.update_log(user.user_id, DailyLogUpdate(id=log.id, attendance="Leave"))

    assert updated.attendance == "Leave"
    assert (updated.in_time, updated.out_time, updated.working_hour) == ("00:00", "00:00", "0.00")
    assert updated.standup == "Sync with team"

    monthly = MonthlyService(DailyLogRepository(db), MonthlyReportRepository(db), service.accrual_service)
    summary, _ = monthly.summarize(user.user_id, "2025-04")
    assert summary.working_hour == "0.00"
    assert summary.per_day_working == 0


def test_leave_in_earlier_month_then_resubmit_later(db, make_user, daily_log_service_factory):
    user = make_user(leave_allowed=0, earned=5)
    service = daily_log_service_factory()

    _, earned = service.create_log(user.user_id, _leave("2025-02-10"))
    assert earned == 4
    _, earned = service.create_log(user.user_id, _leave("2025-01-10"))
    assert earned == 3

    # Same February leave submitted again is merged and changes nothing
    _, earned = service.create_log(user.user_id, _leave("2025-02-10"))

    assert earned == 3
    db.expire_all()
    assert UserRepository(db).get_by_id(user.user_id).user_earned_leave == 3

#!/usr/bin/env python3
"""Insert a demo user and a week of daily logs for local development"""

from datetime import date, timedelta
import logging

from sqlalchemy.orm import Session

from worklog.auth import get_password_hash
from worklog.core.config import settings
from worklog.repositories.daily_log_repo import DailyLogRepository
from worklog.repositories.leave_accrual_repo import LeaveAccrualRepository
from worklog.repositories.user_repo import UserRepository
from worklog.schemas.daily_logs import AttendanceStatus, DailyLogCreate
from worklog.services.daily_log_service import DailyLogService
from worklog.services.leave_accrual_service import LeaveAccrualService
from worklog.services.leave_policy import get_leave_policy

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@worklog.local"
DEMO_PASSWORD = "demo1234"


def _demo_entries(today: date):
    """Seven days back from yesterday: Sundays as Weekend, one Leave, the rest Present"""
    entries = []
    for offset in range(7, 0, -1):
        day = today - timedelta(days=offset)
        if day.weekday() == 6:
            entries.append(DailyLogCreate(date=day.isoformat(), attendance=AttendanceStatus.WEEKEND.value))
        elif offset == 3:
            entries.append(DailyLogCreate(
                date=day.isoformat(), attendance=AttendanceStatus.LEAVE.value, remarks="Personal work"
            ))
        else:
            entries.append(DailyLogCreate(
                date=day.isoformat(),
                attendance=AttendanceStatus.PRESENT.value,
                in_time="09:30",
                out_time="18:45",
                standup="Planned the day with the team",
                report="Worked on assigned tickets",
            ))
    return entries


def seed_demo_data(db: Session, today: date = None):
    """
    Create the demo user and its logs. Does nothing when the demo user exists.

    Returns the demo user.
    """
    user_repo = UserRepository(db)
    existing = user_repo.get_by_email(DEMO_EMAIL)
    if existing:
        logger.info(f"Demo user already present (id={existing.user_id}), skipping seed")
        return existing

    user = user_repo.create(
        email=DEMO_EMAIL,
        hashed_password=get_password_hash(DEMO_PASSWORD),
        salary=settings.DEFAULT_SALARY,
        salary_credited_day=settings.DEFAULT_SALARY_CREDITED_DAY,
    )
    user = user_repo.update_fields(user, {
        "name": "Demo User",
        "department": "Engineering",
        "designation": "Software Developer",
        "leave_allowed_per_month": 2,
    })

    daily_log_repo = DailyLogRepository(db)
    accrual_service = LeaveAccrualService(
        daily_log_repo, user_repo, LeaveAccrualRepository(db), get_leave_policy(settings.LEAVE_POLICY), db
    )
    daily_log_service = DailyLogService(daily_log_repo, accrual_service, db)
    for entry in _demo_entries(today or date.today()):
        daily_log_service.create_log(user.user_id, entry)

    logger.info(f"Seeded demo user {DEMO_EMAIL} (id={user.user_id})")
    return user


if __name__ == "__main__":
    from worklog.database import SessionLocal, init_db

    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        seed_demo_data(db)
    finally:
        db.close()

from fastapi import Depends
from sqlalchemy.orm import Session
from worklog.core.config import settings
from worklog.database import get_db
from worklog.repositories.user_repo import UserRepository
from worklog.repositories.daily_log_repo import DailyLogRepository
from worklog.repositories.leave_log_repo import LeaveLogRepository
from worklog.repositories.leave_accrual_repo import LeaveAccrualRepository
from worklog.repositories.monthly_report_repo import MonthlyReportRepository
from worklog.services.auth_service import AuthService
from worklog.services.daily_log_service import DailyLogService
from worklog.services.leave_accrual_service import LeaveAccrualService
from worklog.services.leave_log_service import LeaveLogService
from worklog.services.leave_policy import LeavePolicy, get_leave_policy
from worklog.services.monthly_service import MonthlyService
from worklog.services.profile_service import ProfileService

# Repository Dependencies
def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance"""
    return UserRepository(db)

def get_daily_log_repository(db: Session = Depends(get_db)) -> DailyLogRepository:
    """Get daily log repository instance"""
    return DailyLogRepository(db)

def get_leave_log_repository(db: Session = Depends(get_db)) -> LeaveLogRepository:
    """Get leave log repository instance"""
    return LeaveLogRepository(db)

def get_monthly_report_repository(db: Session = Depends(get_db)) -> MonthlyReportRepository:
    """Get monthly report repository instance"""
    return MonthlyReportRepository(db)

def get_leave_accrual_repository(db: Session = Depends(get_db)) -> LeaveAccrualRepository:
    """Get leave accrual ledger repository instance"""
    return LeaveAccrualRepository(db)

# Service Dependencies
def get_leave_policy_dependency() -> LeavePolicy:
    """Get the configured leave accrual policy"""
    return get_leave_policy(settings.LEAVE_POLICY)

def get_leave_accrual_service(
    daily_log_repo: DailyLogRepository = Depends(get_daily_log_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    leave_accrual_repo: LeaveAccrualRepository = Depends(get_leave_accrual_repository),
    policy: LeavePolicy = Depends(get_leave_policy_dependency),
    db: Session = Depends(get_db)
) -> LeaveAccrualService:
    """Get leave accrual service instance"""
    return LeaveAccrualService(daily_log_repo, user_repo, leave_accrual_repo, policy, db)

def get_daily_log_service(
    daily_log_repo: DailyLogRepository = Depends(get_daily_log_repository),
    accrual_service: LeaveAccrualService = Depends(get_leave_accrual_service),
    db: Session = Depends(get_db)
) -> DailyLogService:
    """Get daily log service instance"""
    return DailyLogService(daily_log_repo, accrual_service, db, duplicate_policy=settings.DUPLICATE_POLICY)

def get_monthly_service(
    daily_log_repo: DailyLogRepository = Depends(get_daily_log_repository),
    monthly_report_repo: MonthlyReportRepository = Depends(get_monthly_report_repository),
    accrual_service: LeaveAccrualService = Depends(get_leave_accrual_service)
) -> MonthlyService:
    """Get monthly service instance"""
    return MonthlyService(
        daily_log_repo,
        monthly_report_repo,
        accrual_service,
        weekend_strategy=settings.WEEKEND_STRATEGY,
        standard_working_hours=settings.STANDARD_WORKING_HOURS,
    )

def get_auth_service(user_repo: UserRepository = Depends(get_user_repository)) -> AuthService:
    """Get auth service instance"""
    return AuthService(
        user_repo,
        default_salary=settings.DEFAULT_SALARY,
        default_salary_credited_day=settings.DEFAULT_SALARY_CREDITED_DAY,
    )

def get_profile_service(
    user_repo: UserRepository = Depends(get_user_repository),
    leave_accrual_repo: LeaveAccrualRepository = Depends(get_leave_accrual_repository)
) -> ProfileService:
    """Get profile service instance"""
    return ProfileService(user_repo, leave_accrual_repo)

def get_leave_log_service(leave_log_repo: LeaveLogRepository = Depends(get_leave_log_repository)) -> LeaveLogService:
    """Get leave log service instance"""
    return LeaveLogService(leave_log_repo)

# Authentication Dependencies
from worklog.auth import get_current_user_id

import logging
from fastapi import APIRouter, Query, Depends
from typing import Optional
from worklog.dependencies import get_current_user_id, get_daily_log_service
from worklog.schemas.daily_logs import (
    DailyLogCreate, DailyLogUpdate, DailyLogDelete,
    DailyLogListResponse, DailyLogMutationResponse
)
from worklog.schemas.meta import SuccessResponse
from worklog.services.daily_log_service import DailyLogService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/daily", response_model=DailyLogListResponse)
def list_daily_logs(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    current_user_id: int = Depends(get_current_user_id),
    daily_log_service: DailyLogService = Depends(get_daily_log_service)
):
    """List the caller's daily logs, newest first"""
    records = daily_log_service.list_logs(current_user_id, month)
    logger.info(f"/daily returning {len(records)} records for user {current_user_id}")
    return DailyLogListResponse(records=records)


@router.get("/daily/{log_date}", response_model=DailyLogMutationResponse)
def get_daily_log(
    log_date: str,
    current_user_id: int = Depends(get_current_user_id),
    daily_log_service: DailyLogService = Depends(get_daily_log_service)
):
    log = daily_log_service.get_log_by_date(current_user_id, log_date)
    return DailyLogMutationResponse(message="Report found", log=log)


@router.post("/daily", response_model=DailyLogMutationResponse)
def create_daily_log(
    request: DailyLogCreate,
    current_user_id: int = Depends(get_current_user_id),
    daily_log_service: DailyLogService = Depends(get_daily_log_service)
):
    log, earned_leave = daily_log_service.create_log(current_user_id, request)
    return DailyLogMutationResponse(message="Report saved successfully", log=log, earned_leave=earned_leave)


@router.patch("/daily", response_model=DailyLogMutationResponse)
def update_daily_log(
    request: DailyLogUpdate,
    current_user_id: int = Depends(get_current_user_id),
    daily_log_service: DailyLogService = Depends(get_daily_log_service)
):
    log, earned_leave = daily_log_service.update_log(current_user_id, request)
    return DailyLogMutationResponse(message="Report updated successfully.", log=log, earned_leave=earned_leave)


@router.delete("/daily", response_model=SuccessResponse)
def delete_daily_log(
    request: DailyLogDelete,
    current_user_id: int = Depends(get_current_user_id),
    daily_log_service: DailyLogService = Depends(get_daily_log_service)
):
    daily_log_service.delete_log(current_user_id, request.id)
    return SuccessResponse(message="Report deleted successfully.")

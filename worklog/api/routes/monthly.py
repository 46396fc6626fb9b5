import io
import logging
from fastapi import APIRouter, Query, Depends
from fastapi.responses import StreamingResponse
from typing import Optional
from worklog.dependencies import get_current_user_id, get_monthly_service
from worklog.schemas.monthly import (
    MonthlySaveRequest, MonthlySummaryResponse, SavedMonthlyReportList
)
from worklog.schemas.meta import SuccessResponse
from worklog.services.monthly_service import MonthlyService

logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/monthly", response_model=MonthlySummaryResponse)
def get_monthly_summary(
    month: str = Query(..., description="YYYY-MM"),
    current_user_id: int = Depends(get_current_user_id),
    monthly_service: MonthlyService = Depends(get_monthly_service)
):
    """Live monthly rollup: working days, hours and leave balance"""
    summary, records = monthly_service.get_monthly_summary(current_user_id, month)
    return MonthlySummaryResponse(summary=summary, records=records)


@router.post("/monthly", response_model=SuccessResponse)
def save_monthly_summary(
    request: MonthlySaveRequest,
    current_user_id: int = Depends(get_current_user_id),
    monthly_service: MonthlyService = Depends(get_monthly_service)
):
    monthly_service.save_summary(current_user_id, request.month)
    return SuccessResponse(message="Monthly summary saved.")


@router.get("/monthly/saved", response_model=SavedMonthlyReportList)
def list_saved_summaries(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    current_user_id: int = Depends(get_current_user_id),
    monthly_service: MonthlyService = Depends(get_monthly_service)
):
    return SavedMonthlyReportList(records=monthly_service.list_saved(current_user_id, month))


@router.get("/monthly/download")
def download_monthly_report(
    month: str = Query(..., description="YYYY-MM"),
    current_user_id: int = Depends(get_current_user_id),
    monthly_service: MonthlyService = Depends(get_monthly_service)
):
    """Monthly logs and summary as an Excel workbook"""
    content = monthly_service.export_month(current_user_id, month)
    logger.info(f"/monthly/download generated {len(content)} bytes for user {current_user_id} month {month}")
    headers = {"Content-Disposition": f'attachment; filename="worklog_{month}.xlsx"'}
    return StreamingResponse(io.BytesIO(content), media_type=XLSX_MEDIA_TYPE, headers=headers)

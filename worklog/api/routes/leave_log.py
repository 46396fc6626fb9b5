from fastapi import APIRouter, Depends
from worklog.dependencies import get_current_user_id, get_leave_log_service
from worklog.schemas.leave_logs import (
    LeaveLogCreate, LeaveLogUpdate, LeaveLogDelete, LeaveLogEnvelope, LeaveLogListResponse
)
from worklog.schemas.meta import SuccessResponse
from worklog.services.leave_log_service import LeaveLogService

router = APIRouter()


@router.get("/leave-log", response_model=LeaveLogListResponse)
def list_leave_logs(
    current_user_id: int = Depends(get_current_user_id),
    leave_log_service: LeaveLogService = Depends(get_leave_log_service)
):
    return LeaveLogListResponse(logs=leave_log_service.list_logs(current_user_id))


@router.post("/leave-log", response_model=LeaveLogEnvelope)
def create_leave_log(
    request: LeaveLogCreate,
    current_user_id: int = Depends(get_current_user_id),
    leave_log_service: LeaveLogService = Depends(get_leave_log_service)
):
    return LeaveLogEnvelope(log=leave_log_service.create_log(current_user_id, request))


@router.patch("/leave-log", response_model=LeaveLogEnvelope)
def update_leave_log(
    request: LeaveLogUpdate,
    current_user_id: int = Depends(get_current_user_id),
    leave_log_service: LeaveLogService = Depends(get_leave_log_service)
):
    return LeaveLogEnvelope(log=leave_log_service.update_log(current_user_id, request))


@router.delete("/leave-log", response_model=SuccessResponse)
def delete_leave_log(
    request: LeaveLogDelete,
    current_user_id: int = Depends(get_current_user_id),
    leave_log_service: LeaveLogService = Depends(get_leave_log_service)
):
    leave_log_service.delete_log(current_user_id, request.id)
    return SuccessResponse()

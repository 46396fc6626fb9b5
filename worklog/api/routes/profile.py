from fastapi import APIRouter, Depends
from worklog.dependencies import get_current_user_id, get_profile_service
from worklog.schemas.profile import ProfileEnvelope, ProfileUpdate
from worklog.services.profile_service import ProfileService

router = APIRouter()


@router.get("/profile", response_model=ProfileEnvelope)
def get_profile(
    current_user_id: int = Depends(get_current_user_id),
    profile_service: ProfileService = Depends(get_profile_service)
):
    return ProfileEnvelope(user=profile_service.get_profile(current_user_id))


@router.patch("/profile", response_model=ProfileEnvelope)
def update_profile(
    request: ProfileUpdate,
    current_user_id: int = Depends(get_current_user_id),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Edit profile fields; salary history changes go through salary_history.action"""
    return ProfileEnvelope(user=profile_service.update_profile(current_user_id, request))

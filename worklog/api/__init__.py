from fastapi import APIRouter
from .routes import auth, daily, monthly, profile, leave_log

router = APIRouter()

# Include all route modules
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(daily.router, prefix="", tags=["daily"])
router.include_router(monthly.router, prefix="", tags=["monthly"])
router.include_router(profile.router, prefix="", tags=["profile"])
router.include_router(leave_log.router, prefix="", tags=["leave-log"])

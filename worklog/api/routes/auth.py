from fastapi import APIRouter, Depends
from worklog.dependencies import get_auth_service
from worklog.schemas.auth import EmailCheck, LoginResponse, PasswordReset, RegisterResponse, UserCreate, UserLogin
from worklog.schemas.meta import SuccessResponse
from worklog.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=RegisterResponse)
def register(request: UserCreate, auth_service: AuthService = Depends(get_auth_service)):
    user = auth_service.register(request)
    return RegisterResponse(user=user, message="User created successfully")


@router.post("/login", response_model=LoginResponse)
def login(request: UserLogin, auth_service: AuthService = Depends(get_auth_service)):
    return auth_service.login(request)


@router.post("/check-mail", response_model=SuccessResponse)
def check_mail(request: EmailCheck, auth_service: AuthService = Depends(get_auth_service)):
    auth_service.check_email(request.email)
    return SuccessResponse()


@router.post("/reset-password", response_model=SuccessResponse)
def reset_password(request: PasswordReset, auth_service: AuthService = Depends(get_auth_service)):
    auth_service.reset_password(request)
    return SuccessResponse(message="Password reset successful.")

import logging

from worklog.auth import create_access_token, get_password_hash, verify_password
from worklog.core.exceptions import AuthError, DuplicateError, NotFoundError, ValidationError
from worklog.repositories.user_repo import UserRepository
from worklog.schemas.auth import LoginResponse, PasswordReset, UserCreate, UserLogin
from worklog.schemas.profile import ProfileResponse

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthService:
    def __init__(self, user_repo: UserRepository, default_salary: float = 10000,
                 default_salary_credited_day: int = 7):
        self.user_repo = user_repo
        self.default_salary = default_salary
        self.default_salary_credited_day = default_salary_credited_day

    def register(self, request: UserCreate) -> ProfileResponse:
        if not request.password:
            raise ValidationError("Email and password required")
        if self.user_repo.get_by_email(request.email):
            raise DuplicateError("Email already registered")

        user = self.user_repo.create(
            email=request.email,
            hashed_password=get_password_hash(request.password),
            salary=self.default_salary,
            salary_credited_day=self.default_salary_credited_day,
        )
        logger.info(f"Registered user {user.user_id}")
        return ProfileResponse.from_model(user)

    def login(self, request: UserLogin) -> LoginResponse:
        user = self.user_repo.get_by_email(request.email)
        if not user or not verify_password(request.password, user.user_hashed_password):
            logger.info("Login failed: invalid credentials")
            raise AuthError("Invalid credentials")

        token = create_access_token({"user_id": user.user_id})
        logger.info(f"Login successful for user {user.user_id}")
        return LoginResponse(token=token, user=ProfileResponse.from_model(user))

    def check_email(self, email: str) -> bool:
        if not self.user_repo.get_by_email(email):
            raise NotFoundError("Email not found")
        return True

    def reset_password(self, request: PasswordReset) -> None:
        if not isinstance(request.password, str) or len(request.password.strip()) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters and not just whitespace."
            )
        user = self.user_repo.get_by_email(request.email)
        if not user:
            raise NotFoundError("User not found.")
        self.user_repo.set_password(user, get_password_hash(request.password))
        logger.info(f"Password reset for user {user.user_id}")

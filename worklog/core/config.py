from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Base settings
    PROJECT_NAME: str = "Worklog Tracker"
    API_PREFIX: str = "/api"

    # Logging settings
    LOG_LEVEL: str = "INFO"

    # API settings
    DEBUG: bool = False
    FRONTEND_URL: str = "http://localhost:3000"

    # Database settings
    DATABASE_URL: str = "sqlite:///./worklog.db"

    # JWT settings
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # passlib scheme used for new hashes
    PASSWORD_SCHEME: str = "bcrypt"

    # Leave accrual: "ceiling" (deduct only leaves above the monthly allowance)
    # or "carry_forward" (bank unused allowance, consume earned leave first)
    LEAVE_POLICY: str = "ceiling"

    # Second submission for the same date: "upsert" merges, "reject" fails
    DUPLICATE_POLICY: str = "upsert"

    # Monthly summary weekends: "sundays" counts calendar Sundays,
    # "records" counts logs flagged Weekend
    WEEKEND_STRATEGY: str = "sundays"
    STANDARD_WORKING_HOURS: int = 9

    # Registration defaults
    DEFAULT_SALARY: float = 10000
    DEFAULT_SALARY_CREDITED_DAY: int = 7

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()

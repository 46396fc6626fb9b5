# worklog/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from worklog.api import router as api_router
from worklog.core.config import settings
from worklog.core.exceptions import WorklogError
from worklog.schemas.meta import ErrorResponse
from worklog.database import init_db
import logging

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and turns unexpected errors into the JSON error body
    """

    async def dispatch(self, request: Request, call_next):
        logger.info(f"Request: {request.method} {request.url}")

        if request.url.path.startswith(settings.API_PREFIX + "/") and request.method != "OPTIONS":
            if request.headers.get("Authorization"):
                logger.debug("Auth header present")
            else:
                logger.debug("No auth header found")

        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(f"Unexpected error on {request.method} {request.url.path}: {e}")
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(message="Internal server error").model_dump()
            )


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Daily work logs, monthly summaries and leave accrual",
    version="1.0.0",
    debug=settings.DEBUG
)

app.add_middleware(RequestLoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*", settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorklogError)
async def worklog_error_handler(request: Request, exc: WorklogError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump()
    )


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info(f"{settings.PROJECT_NAME} started (leave policy: {settings.LEAVE_POLICY})")


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "message": f"{settings.PROJECT_NAME} API is running"}


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": f"{settings.PROJECT_NAME} API",
        "version": "1.0.0",
        "status": "running",
        "health_check": "/health"
    }


app.include_router(api_router, prefix=settings.API_PREFIX)

from pydantic import BaseModel
from typing import Optional


class ApiResponse(BaseModel):
    success: bool
    message: Optional[str] = None


class SuccessResponse(ApiResponse):
    success: bool = True


class ErrorResponse(ApiResponse):
    success: bool = False
    message: str

from datetime import datetime

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    code: str = Field(..., description="Machine-readable error code, e.g. NOT_FOUND.")
    message: str = Field(..., description="Human-readable error message.")
    timestamp: datetime = Field(..., description="When the error was produced (UTC).")

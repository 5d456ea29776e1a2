from typing import List
from pydantic import BaseModel, ConfigDict, Field

from .verdicts import VerdictStatus

class SourceModel(BaseModel):
    title: str
    url: str
    summary: str

class FactCheckRequest(BaseModel):
    """Documents the request body; parsing is done by hand to answer 400 instead of 422."""
    text: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "O Amazonas é o maior estado do Brasil"
            }
        }
    )

class FactCheckResponse(BaseModel):
    status: VerdictStatus
    confidence: int = Field(..., ge=0, le=100)
    justification: str
    sources: List[SourceModel]
    cached: bool

class ErrorResponse(BaseModel):
    error: str

class RateLimitResponse(ErrorResponse):
    retryAfter: int

class ServerErrorResponse(ErrorResponse):
    """Keeps the verdict shape so clients reading only status/confidence do not break."""
    status: VerdictStatus = "uncertain"
    confidence: int
    justification: str
    sources: List[SourceModel]
    cached: bool = False

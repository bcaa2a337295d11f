"""
Pydantic base models for request/response validation.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from app.models.report import utcnow


class BaseResponse(BaseModel):
    """
    Base response model for API responses.
    All API responses can extend this for consistency.
    """
    success: bool = True
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)

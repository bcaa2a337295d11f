"""
Models for uploaded image assets.
"""

from pydantic import BaseModel, Field
from datetime import datetime

from app.models.report import utcnow


class ImageAsset(BaseModel):
    """An uploaded photo registered in the image registry."""
    id: int = Field(..., description="Upload-time based identifier (epoch milliseconds)")
    filename: str = Field(..., description="Name of the file on disk")
    original_name: str = Field(default="", description="Client-side filename")
    url: str = Field(..., description="URL path the photo is served from")
    uploaded_at: datetime = Field(default_factory=utcnow)
    size: int = Field(..., ge=0, description="Size in bytes")

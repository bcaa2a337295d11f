"""
Pydantic models for community waste reports.
These models handle validation for report submission, storage and responses.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from enum import Enum


class ReportType(str, Enum):
    """Kinds of issue a citizen can report (form select values)."""
    GARBAGE = "garbage"
    ANIMAL_DEATH = "animal-death"
    ANIMAL_ADOPT = "animal-adopt"
    ANIMAL_CARE = "animal-care"
    CLEANING = "cleaning"
    RECYCLING = "recycling"
    HAZARDOUS = "hazardous"
    OTHER = "other"


class Priority(str, Enum):
    """Priority tiers, most urgent first."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Placeholders stored when optional form fields are left blank
NOT_SPECIFIED = "Not specified"
ANONYMOUS = "Anonymous"
NOT_PROVIDED = "Not provided"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportCreate(BaseModel):
    """
    Model for an incoming report submission.
    These are the text fields of the multipart form; the photo travels separately.
    """
    location: str = Field(..., min_length=3, max_length=200, description="Where the issue was observed")
    type: ReportType = Field(..., description="Report type (from form select)")
    description: str = Field(..., min_length=10, max_length=300, description="What the citizen observed")
    size: Optional[str] = Field(None, max_length=100, description="Approximate size of the waste pile")
    accessibility: Optional[str] = Field(None, max_length=100, description="How easy the spot is to reach")
    name: Optional[str] = Field(None, max_length=100, description="Reporter name (may be blank)")
    phone: Optional[str] = Field(None, max_length=30, description="Reporter phone (may be blank)")

    class Config:
        str_strip_whitespace = True
        json_schema_extra = {
            "example": {
                "location": "Behind the bus depot, Sector 4",
                "type": "garbage",
                "description": "Overflowing bins left uncollected for a week.",
                "size": "Large",
                "accessibility": "Roadside",
                "name": "Asha",
                "phone": "9876543210",
            }
        }


class Comment(BaseModel):
    """A single entry in a report's append-only comment trail."""
    text: str = Field(..., min_length=1, max_length=1000)
    author: str = Field(default=ANONYMOUS)
    created_at: datetime = Field(default_factory=utcnow)


class CommentCreate(BaseModel):
    """Request body for adding a comment."""
    text: str = Field(..., max_length=1000, description="Comment text")
    author: Optional[str] = Field(None, max_length=100, description="Who is commenting")


class StatusHistoryEntry(BaseModel):
    """Status transition history entry."""
    from_status: str = Field(..., description="Previous status (empty for creation)")
    to_status: str = Field(..., description="New status")
    changed_by: str = Field(..., description="Who or what made the change")
    timestamp: datetime = Field(default_factory=utcnow, description="When change occurred")
    note: Optional[str] = Field(None, description="Optional note explaining the change")


class Report(BaseModel):
    """
    A stored report, as persisted by the report store and returned by the API.
    """
    id: int = Field(..., description="Creation-time based identifier (epoch milliseconds)")
    location: str
    type: str
    description: str
    size: str = NOT_SPECIFIED
    accessibility: str = NOT_SPECIFIED
    name: str = ANONYMOUS
    phone: str = NOT_PROVIDED
    image: str = Field(..., description="URL path of the stored photo")
    status: str = Field(default="Pending", description="Lifecycle status")
    priority: Optional[str] = Field(None, description="Priority assigned at creation from type")
    comments: List[Comment] = Field(default_factory=list)
    status_history: List[StatusHistoryEntry] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utcnow, description="When report was created")

    class Config:
        json_schema_extra = {
            "example": {
                "id": 1718000000000,
                "location": "Behind the bus depot, Sector 4",
                "type": "hazardous",
                "description": "Broken chemical drums leaking near the drain.",
                "size": "Medium",
                "accessibility": "Roadside",
                "name": "Anonymous",
                "phone": "Not provided",
                "image": "/uploads/uploaded-1718000000000-12345.jpg",
                "status": "Pending",
                "priority": "Critical",
                "comments": [],
                "status_history": [],
                "timestamp": "2024-06-10T06:13:20Z",
            }
        }


class ReportSummary(BaseModel):
    """Counts of reports grouped for the dashboard summary strip."""
    total: int = 0
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_priority: Dict[str, int] = Field(default_factory=dict)


class TopPrioritySelection(BaseModel):
    """
    The most urgent report plus the rest of the list, in priority order.
    `empty` is the explicit "no reports" signal; `top` is None only then.
    """
    top: Optional[Report] = None
    others: List[Report] = Field(default_factory=list)

    @property
    def empty(self) -> bool:
        return self.top is None


class ResolveRequest(BaseModel):
    """Optional body for a manual resolve."""
    changed_by: Optional[str] = Field(None, max_length=100)
    note: Optional[str] = Field(None, max_length=500)


class ClearReportsRequest(BaseModel):
    """Administrative bulk clear request."""
    password: str = Field(default="", description="Admin password")


def report_from_record(record: Dict[str, Any]) -> Report:
    """
    Build a Report from a stored record.

    Older records carry a single `comment` string instead of the comment
    trail, and may use "Reported" for the initial status.
    """
    data = dict(record)
    legacy_comment = data.pop("comment", None)
    comments = list(data.get("comments") or [])
    existing = {c.get("text") if isinstance(c, dict) else getattr(c, "text", None) for c in comments}
    if legacy_comment and legacy_comment not in existing:
        # The scalar comment predates the trail
        comments.insert(0, {"text": legacy_comment})
    data["comments"] = comments
    if data.get("status") == "Reported":
        data["status"] = "Pending"
    return Report(**data)

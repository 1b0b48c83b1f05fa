"""
Pydantic models for resident issue reports.
These models handle validation for issue submission and responses.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional
from enum import Enum

from app.core.settings import settings


class IssuePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IssueStatus(str, Enum):
    """Workflow states of an issue."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class IssueCreate(BaseModel):
    """
    Model for creating a new issue (incoming POST request).
    Only residents may submit issues.
    """
    title: str = Field(..., min_length=1, max_length=200, description="Short summary of the issue")
    category: str = Field(..., min_length=1, max_length=100, description="Issue category (e.g. Roads, Garbage)")
    description: Optional[str] = Field(None, max_length=2000, description="What the resident observed")
    priority: IssuePriority = Field(default=IssuePriority.MEDIUM, description="Resident-assessed priority")
    photos: List[str] = Field(default_factory=list, description="Uploaded photo URLs")
    location: Optional[str] = Field(None, max_length=500, description="Human-readable address")
    latitude: Optional[float] = Field(None, allow_inf_nan=False, description="Latitude coordinate")
    longitude: Optional[float] = Field(None, allow_inf_nan=False, description="Longitude coordinate")
    date_observed: Optional[str] = Field(None, description="Date the issue was observed (YYYY-MM-DD)")
    time_observed: Optional[str] = Field(None, description="Time the issue was observed (HH:MM)")
    user_id: str = Field(..., min_length=1, description="Authenticated user identifier")
    role: str = Field(..., description='Caller role, must be "resident"')

    @field_validator("role")
    @classmethod
    def role_must_be_resident(cls, value: str) -> str:
        if value != "resident":
            raise ValueError('role must be "resident"')
        return value

    @field_validator("photos")
    @classmethod
    def validate_photos(cls, value: List[str]) -> List[str]:
        if len(value) > settings.MAX_ISSUE_PHOTOS:
            raise ValueError(f"Maximum {settings.MAX_ISSUE_PHOTOS} photos allowed")
        if any(not photo.strip() for photo in value):
            raise ValueError("All photo URLs must be valid strings")
        return value

    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Broken streetlight",
                "category": "Street Lighting",
                "description": "Streetlight has been out for a week.",
                "priority": "medium",
                "photos": ["https://example.com/photo.jpg"],
                "location": "12 Nagoda Road, Makola",
                "latitude": 6.9745,
                "longitude": 79.95,
                "date_observed": "2024-06-01",
                "time_observed": "19:30",
                "user_id": "user-123",
                "role": "resident",
            }
        }
        extra = "ignore"


class ResidentSummary(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None


class IssueResponse(BaseModel):
    """Issue as returned by the API."""
    issue_id: str = Field(..., description="Firestore document ID")
    title: str
    photos: List[str] = Field(default_factory=list)
    category: str
    description: Optional[str] = None
    status: IssueStatus = IssueStatus.OPEN
    priority: IssuePriority = IssuePriority.MEDIUM
    created_date: Optional[str] = Field(None, description="Creation time in the display timezone (YYYY-MM-DD HH:MM:SS)")
    vote_count: int = 0
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    date_observed: Optional[str] = None
    time_observed: Optional[str] = None
    user_id: Optional[str] = None
    resident_id: str
    residents: Optional[ResidentSummary] = None


class IssueCreatedResponse(BaseModel):
    message: str
    issue: IssueResponse


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class IssueListResponse(BaseModel):
    issues: List[IssueResponse]
    pagination: Pagination


class StatusUpdateRequest(BaseModel):
    """Status change request; only urban councilors may change status."""
    status: IssueStatus = Field(..., description="New workflow status")
    user_id: Optional[str] = Field(None, description="User making the change")
    role: str = Field(..., description='Caller role, must be "urban_councilor"')


class StatusUpdateResponse(BaseModel):
    message: str
    issue: IssueResponse
    previousStatus: IssueStatus
    newStatus: IssueStatus


class VoteRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="Voting user")
    action: Literal["upvote", "downvote"]


class VoteResponse(BaseModel):
    message: str
    vote_count: int

"""
Pydantic models for prototyping project requests.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from storefront.models.common import FileDescriptor


class ProjectStatus(str, Enum):
    """Prototyping project status enumeration."""
    SUBMITTED = "submitted"
    IN_REVIEW = "in_review"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class PrototypingProjectSubmit(BaseModel):
    """Form fields of a project submission (files travel separately)."""
    project_name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=10, description="At least 10 characters")
    budget_range: Optional[str] = None
    timeline: Optional[str] = None

    @field_validator('project_name', 'category')
    @classmethod
    def validate_not_empty_or_whitespace(cls, v: str) -> str:
        """Validate that string fields are not empty or only whitespace."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or contain only whitespace")
        return v.strip()

    @field_validator('budget_range', 'timeline')
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus


class PrototypingProjectCreate(PrototypingProjectSubmit):
    """Storage input for a new project."""
    user_id: str
    status: ProjectStatus = ProjectStatus.SUBMITTED
    files: List[FileDescriptor] = Field(default_factory=list)


class PrototypingProject(PrototypingProjectCreate):
    """Stored project record."""
    id: str
    created_at: datetime

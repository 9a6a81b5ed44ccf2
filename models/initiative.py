"""
Initiative schemas for validation and serialization.

Taxonomy-backed fields (team, status, priority, ...) are free strings here;
they are reconciled against config items before creation.
"""

from pydantic import Field, field_validator, model_validator
from typing import Optional
from datetime import date

from models.base import BaseSchema, PatchSchema, TimestampMixin


class InitiativeCreate(BaseSchema):
    """
    Create a new initiative.

    Required: title, description, product_area, team, priority, status,
    start_date, end_date, owner_id, created_by_id
    """

    title: str = Field(..., min_length=1, max_length=200, description="Initiative title")
    description: str = Field(..., min_length=1, description="What the initiative delivers")
    goal: Optional[str] = Field(None, description="Target outcome")
    product_area: str = Field(..., min_length=1, description="Product area label")
    team: str = Field(..., min_length=1, description="Owning team label")
    tier: int = Field(default=1, ge=1, le=3, description="Strategic tier (1 = highest)")
    priority: str = Field(..., min_length=1, description="Priority label")
    status: str = Field(..., min_length=1, description="Status label")
    progress: int = Field(default=0, ge=0, le=100, description="Percent complete")
    start_date: date = Field(..., description="Planned start")
    end_date: date = Field(..., description="Planned end")
    estimated_release_date: Optional[date] = None
    actual_release_date: Optional[date] = None
    owner_id: str = Field(..., min_length=1, description="Owner user UUID")
    created_by_id: str = Field(..., min_length=1, description="Creator user UUID")
    business_impact: Optional[str] = Field(None, description="Business impact label")
    process_stage: Optional[str] = Field(None, description="Process stage label")
    gtm_type: Optional[str] = Field(None, description="Go-to-market type label")
    tags: list[str] = Field(default_factory=list)
    executive_update: Optional[str] = Field(None, description="Latest note for executives")
    reason_if_not_on_track: Optional[str] = None
    show_on_executive_summary: bool = False

    @model_validator(mode="after")
    def end_after_start(self) -> "InitiativeCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class InitiativeUpdate(PatchSchema):
    """
    Update existing initiative.

    All fields optional - only provided fields are updated. Required
    columns can be left out but not cleared.
    """

    non_nullable = frozenset({
        "title", "description", "product_area", "team", "tier", "priority",
        "status", "progress", "start_date", "end_date", "owner_id", "tags",
        "show_on_executive_summary",
    })

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    goal: Optional[str] = None
    product_area: Optional[str] = Field(None, min_length=1)
    team: Optional[str] = Field(None, min_length=1)
    tier: Optional[int] = Field(None, ge=1, le=3)
    priority: Optional[str] = Field(None, min_length=1)
    status: Optional[str] = Field(None, min_length=1)
    progress: Optional[int] = Field(None, ge=0, le=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    estimated_release_date: Optional[date] = None
    actual_release_date: Optional[date] = None
    owner_id: Optional[str] = Field(None, min_length=1)
    last_updated_by_id: Optional[str] = None
    business_impact: Optional[str] = None
    process_stage: Optional[str] = None
    gtm_type: Optional[str] = None
    tags: Optional[list[str]] = None
    executive_update: Optional[str] = None
    reason_if_not_on_track: Optional[str] = None
    show_on_executive_summary: Optional[bool] = None


class ExecutiveUpdateRequest(BaseSchema):
    """
    Stakeholder update shown on the executive summary.

    Saving an update flags the initiative for the summary unless told
    otherwise.
    """

    executive_update: str = Field(..., min_length=1, description="Message for executives")
    reason_if_not_on_track: Optional[str] = None
    show_on_executive_summary: bool = True
    updated_by_id: Optional[str] = Field(None, description="User posting the update")


class InitiativeResponse(BaseSchema, TimestampMixin):
    """Initiative with all fields."""

    id: str = Field(..., description="Initiative UUID")
    title: str
    description: Optional[str] = None
    goal: Optional[str] = None
    product_area: Optional[str] = None
    team: Optional[str] = None
    tier: int = 1
    priority: Optional[str] = None
    status: Optional[str] = None
    progress: int = 0
    start_date: date
    end_date: date
    estimated_release_date: Optional[date] = None
    actual_release_date: Optional[date] = None
    owner_id: Optional[str] = None
    created_by_id: Optional[str] = None
    last_updated_by_id: Optional[str] = None
    business_impact: Optional[str] = None
    process_stage: Optional[str] = None
    gtm_type: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    executive_update: Optional[str] = None
    reason_if_not_on_track: Optional[str] = None
    show_on_executive_summary: bool = False

    @field_validator("tags", mode="before")
    @classmethod
    def tags_default(cls, v):
        return v or []


class InitiativeStats(BaseSchema):
    """Dashboard headline numbers."""

    total: int = Field(..., description="Number of initiatives")
    by_status: dict[str, int] = Field(default_factory=dict, description="Count per status label")
    overall_progress: float = Field(..., description="Mean progress, 0 when empty")


class ExecutiveSummary(BaseSchema):
    """Executive summary page: key metrics plus the initiatives to read about."""

    total: int
    completed: int
    in_progress: int = Field(..., description="Initiatives on track")
    at_risk: int = Field(..., description="Initiatives at risk or off track")
    average_progress: float
    completion_rate: float = Field(..., description="Percent of initiatives complete")
    critical: list[InitiativeResponse] = Field(default_factory=list, description="Critical priority")
    flagged: list[InitiativeResponse] = Field(
        default_factory=list,
        description="Initiatives marked to show on the executive summary"
    )
    needs_attention: list[InitiativeResponse] = Field(
        default_factory=list,
        description="Critical priority, at risk or off track"
    )
    overview: str = Field(..., description="One-paragraph generated summary")

"""
Compliance Models
=================

Models for compliance categories, items, recommendations and the
weighted compliance score.

Version: 0.1.0
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Grade(str, Enum):
    """Letter grade for an overall compliance score."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class Priority(str, Enum):
    """Recommendation priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, most urgent first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


class ComplianceItem(BaseModel):
    """A single scored obligation within a category."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    points: int = Field(..., ge=0)
    completed: bool = False
    due_date: date | None = None


class ComplianceCategory(BaseModel):
    """A weighted group of compliance items."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    weight: float = Field(..., ge=0, description="Relative weight in the overall score")
    max_points: int = Field(default=0, ge=0)
    current_points: int = Field(default=0, ge=0)
    score: int = Field(default=0, ge=0, le=100)
    items: tuple[ComplianceItem, ...] = ()

    @property
    def incomplete_items(self) -> list[ComplianceItem]:
        """Items still to be done, in declared order."""
        return [item for item in self.items if not item.completed]


class ComplianceRecommendation(BaseModel):
    """A remediation action."""

    model_config = ConfigDict(frozen=True)

    priority: Priority
    category: str
    title: str
    description: str
    action: str
    impact: str = Field(..., description="Estimated score impact, e.g. '+20 points'")


class ComplianceScoreResult(BaseModel):
    """Weighted compliance score for an organization at a point in time."""

    model_config = ConfigDict(frozen=True)

    organization_id: str
    overall_score: int = Field(..., ge=0, le=100)
    overall_grade: Grade
    categories: tuple[ComplianceCategory, ...]
    last_updated: datetime
    next_review_date: datetime
    recommendations: tuple[ComplianceRecommendation, ...] = ()

"""
Compliance Scoring Engine
=========================

Per-category and overall weighted compliance scores.

- category score = completed points / total points * 100 (0 with no points)
- overall score = sum(category score * weight) / sum(weight) (0 with no weight)
- grade from an ordered table of inclusive lower bounds

Weights are normalized by their actual sum; they need not total 100.
Scores round half up.

Version: 0.1.0
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from services.compliance_engine.services.aggregator import AggregateResult
from services.compliance_engine.services.providers import (
    DEFAULT_PROVIDERS,
    CategoryDataProvider,
)
from shared.logging import get_logger
from shared.models.compliance import ComplianceCategory, ComplianceItem, Grade


logger = get_logger(__name__)


# =============================================================================
# Score Configuration
# =============================================================================


@dataclass(frozen=True)
class CategoryDefinition:
    """A scoring category and its weight."""

    id: str
    name: str
    description: str
    weight: float


CATEGORY_DEFINITIONS: tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        id="governance",
        name="Governance",
        description="Board structure, meetings, policies, and decision-making",
        weight=25,
    ),
    CategoryDefinition(
        id="financial",
        name="Financial Management",
        description="Accounting, reporting, reserves, and financial controls",
        weight=25,
    ),
    CategoryDefinition(
        id="regulatory",
        name="Regulatory Compliance",
        description="Charity Commission requirements, annual returns, and legal obligations",
        weight=20,
    ),
    CategoryDefinition(
        id="safeguarding",
        name="Safeguarding",
        description="DBS checks, policies, training, and incident management",
        weight=15,
    ),
    CategoryDefinition(
        id="fundraising",
        name="Fundraising Standards",
        description="Ethical fundraising, donor care, and regulatory compliance",
        weight=10,
    ),
    CategoryDefinition(
        id="data",
        name="Data Protection",
        description="GDPR compliance, privacy policies, and data security",
        weight=5,
    ),
)

# Highest bound first; anything below the last bound is an F
GRADE_THRESHOLDS: tuple[tuple[int, Grade], ...] = (
    (90, Grade.A),
    (80, Grade.B),
    (70, Grade.C),
    (60, Grade.D),
)


# =============================================================================
# Pure scoring functions
# =============================================================================


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, halves upward."""
    return int(math.floor(value + 0.5))


def category_score(items: Iterable[ComplianceItem]) -> int:
    """Completed share of the category's points, 0-100."""
    items = list(items)
    total_points = sum(item.points for item in items)
    if total_points == 0:
        return 0
    completed_points = sum(item.points for item in items if item.completed)
    return round_half_up(completed_points / total_points * 100)


def overall_score(categories: Iterable[ComplianceCategory]) -> int:
    """Weight-normalized mean of category scores, 0-100."""
    categories = list(categories)
    total_weight = sum(c.weight for c in categories)
    if total_weight == 0:
        return 0
    weighted = sum(c.score * c.weight for c in categories)
    return round_half_up(weighted / total_weight)


def grade_for(
    score: int,
    thresholds: Sequence[tuple[int, Grade]] = GRADE_THRESHOLDS,
) -> Grade:
    """Letter grade for a score."""
    for lower_bound, grade in thresholds:
        if score >= lower_bound:
            return grade
    return Grade.F


def build_category(
    definition: CategoryDefinition,
    items: Sequence[ComplianceItem],
) -> ComplianceCategory:
    """Assemble a scored category from its definition and items."""
    return ComplianceCategory(
        id=definition.id,
        name=definition.name,
        description=definition.description,
        weight=definition.weight,
        max_points=sum(item.points for item in items),
        current_points=sum(item.points for item in items if item.completed),
        score=category_score(items),
        items=tuple(items),
    )


# =============================================================================
# Scoring Engine
# =============================================================================


@dataclass(frozen=True)
class ScoreOutcome:
    """Scored categories with the overall score and grade."""

    categories: list[ComplianceCategory]
    overall_score: int
    overall_grade: Grade


class ScoringEngine:
    """
    Scores the fixed compliance categories.

    Each category is wired to a CategoryDataProvider; the engine itself is
    a pure function of (definitions, providers, thresholds, aggregate).
    """

    def __init__(
        self,
        definitions: Sequence[CategoryDefinition] = CATEGORY_DEFINITIONS,
        providers: Mapping[str, CategoryDataProvider] = DEFAULT_PROVIDERS,
        thresholds: Sequence[tuple[int, Grade]] = GRADE_THRESHOLDS,
    ) -> None:
        """
        Initialize the scoring engine.

        Args:
            definitions: Categories and weights
            providers: Item provider per category id
            thresholds: Grade table, highest bound first

        Raises:
            ValueError: A category has no provider
        """
        missing = [d.id for d in definitions if d.id not in providers]
        if missing:
            raise ValueError(f"No data provider for categories: {', '.join(missing)}")

        self.definitions = tuple(definitions)
        self.providers = providers
        self.thresholds = tuple(thresholds)

    def score(self, aggregate: AggregateResult) -> ScoreOutcome:
        """Score every category and combine them."""
        categories = [
            build_category(definition, self.providers[definition.id].items(aggregate))
            for definition in self.definitions
        ]
        overall = overall_score(categories)
        grade = grade_for(overall, self.thresholds)

        logger.debug(
            "categories_scored",
            organization_id=aggregate.organization.id,
            scores={c.id: c.score for c in categories},
            overall=overall,
        )
        return ScoreOutcome(categories=categories, overall_score=overall, overall_grade=grade)

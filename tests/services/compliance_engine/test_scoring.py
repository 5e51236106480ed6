"""
Scoring Engine Tests
====================

Tests for category scores, weight normalization, grades and data
providers.

Version: 0.1.0
"""

import pytest
import pytest_asyncio

from services.compliance_engine.services.aggregator import Aggregator
from services.compliance_engine.services.providers import (
    DEFAULT_PROVIDERS,
    LiveProvider,
    StaticPlaceholderProvider,
    fundraising_items,
    safeguarding_items,
)
from services.compliance_engine.services.scoring import (
    CATEGORY_DEFINITIONS,
    GRADE_THRESHOLDS,
    CategoryDefinition,
    ScoringEngine,
    build_category,
    category_score,
    grade_for,
    overall_score,
    round_half_up,
)
from shared.models.compliance import ComplianceCategory, ComplianceItem, Grade


def _item(points: int, completed: bool, item_id: str = "item") -> ComplianceItem:
    return ComplianceItem(
        id=item_id,
        name=item_id.title(),
        description="Test item",
        points=points,
        completed=completed,
    )


def _category(score: int, weight: float) -> ComplianceCategory:
    return ComplianceCategory(
        id=f"cat-{score}-{weight}",
        name="Category",
        description="Test category",
        weight=weight,
        score=score,
    )


@pytest_asyncio.fixture
async def aggregate(repository, as_of):
    return await Aggregator(repository).aggregate("org-1", 2024, as_of=as_of)


# =============================================================================
# Pure functions
# =============================================================================


class TestRoundHalfUp:
    """Halves round upward."""

    @pytest.mark.parametrize(
        "value,expected",
        [(82.5, 83), (82.4999, 82), (0.5, 1), (2.5, 3), (100.0, 100), (0.0, 0)],
    )
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected


class TestCategoryScore:
    """Completed share of points."""

    def test_partial_completion(self):
        items = [_item(40, False), _item(30, True), _item(20, False), _item(10, True)]
        assert category_score(items) == 40

    def test_all_complete(self):
        assert category_score([_item(25, True), _item(75, True)]) == 100

    def test_rounds_half_up(self):
        # 1 of 8 points = 12.5%
        assert category_score([_item(1, True), _item(7, False)]) == 13

    def test_no_points_scores_zero(self):
        assert category_score([_item(0, True), _item(0, False)]) == 0

    def test_no_items_scores_zero(self):
        assert category_score([]) == 0


class TestOverallScore:
    """Weight-normalized mean."""

    def test_weights_need_not_total_100(self):
        categories = [_category(100, 1), _category(50, 1)]
        assert overall_score(categories) == 75

    def test_weighting(self):
        categories = [_category(80, 3), _category(40, 1)]
        assert overall_score(categories) == 70

    def test_zero_weight_sum_scores_zero(self):
        categories = [_category(100, 0), _category(50, 0)]
        assert overall_score(categories) == 0

    def test_no_categories_scores_zero(self):
        assert overall_score([]) == 0


class TestGradeFor:
    """Inclusive lower bounds."""

    @pytest.mark.parametrize(
        "score,grade",
        [
            (100, Grade.A),
            (90, Grade.A),
            (89, Grade.B),
            (80, Grade.B),
            (79, Grade.C),
            (70, Grade.C),
            (69, Grade.D),
            (60, Grade.D),
            (59, Grade.F),
            (0, Grade.F),
        ],
    )
    def test_boundaries(self, score, grade):
        assert grade_for(score) == grade

    def test_thresholds_are_immutable(self):
        assert isinstance(GRADE_THRESHOLDS, tuple)
        assert isinstance(CATEGORY_DEFINITIONS, tuple)

    def test_custom_thresholds(self):
        assert grade_for(55, thresholds=((50, Grade.A),)) == Grade.A
        assert grade_for(45, thresholds=((50, Grade.A),)) == Grade.F


class TestBuildCategory:
    """Points are derived from items."""

    def test_points(self):
        definition = CategoryDefinition(id="c", name="C", description="", weight=10)
        category = build_category(definition, [_item(60, True, "a"), _item(40, False, "b")])

        assert category.max_points == 100
        assert category.current_points == 60
        assert category.score == 60
        assert [i.id for i in category.incomplete_items] == ["b"]


# =============================================================================
# Providers
# =============================================================================


class TestProviders:
    """Live and placeholder item sources."""

    def test_default_provider_kinds(self):
        live = {cid for cid, provider in DEFAULT_PROVIDERS.items() if provider.live}
        assert live == {"safeguarding", "fundraising"}
        assert set(DEFAULT_PROVIDERS) == {d.id for d in CATEGORY_DEFINITIONS}

    @pytest.mark.asyncio
    async def test_placeholder_ignores_records(self, aggregate):
        provider = StaticPlaceholderProvider([_item(10, True)])
        assert provider.items(aggregate) == [_item(10, True)]

    @pytest.mark.asyncio
    async def test_safeguarding_items_from_records(self, aggregate):
        items = {i.id: i.completed for i in safeguarding_items(aggregate)}

        # 1 of 4 valid checks, 3 of 4 trained
        assert items["dbs-checks"] is False
        assert items["safeguarding-training"] is False
        assert items["safeguarding-policy"] is True

    @pytest.mark.asyncio
    async def test_fundraising_items_from_records(self, aggregate):
        items = {i.id: i.completed for i in fundraising_items(aggregate)}
        assert items["compliance-checks"] is True


# =============================================================================
# Scoring Engine
# =============================================================================


class TestScoringEngine:
    """Scoring the six categories."""

    @pytest.mark.asyncio
    async def test_sample_organization(self, aggregate):
        outcome = ScoringEngine().score(aggregate)
        scores = {c.id: c.score for c in outcome.categories}

        assert scores == {
            "governance": 80,
            "financial": 90,
            "regulatory": 100,
            "safeguarding": 40,
            "fundraising": 100,
            "data": 80,
        }
        # (80*25 + 90*25 + 100*20 + 40*15 + 100*10 + 80*5) / 100 = 82.5
        assert outcome.overall_score == 83
        assert outcome.overall_grade == Grade.B

    @pytest.mark.asyncio
    async def test_category_order_and_weights(self, aggregate):
        outcome = ScoringEngine().score(aggregate)

        assert [(c.id, c.weight) for c in outcome.categories] == [
            ("governance", 25),
            ("financial", 25),
            ("regulatory", 20),
            ("safeguarding", 15),
            ("fundraising", 10),
            ("data", 5),
        ]

    @pytest.mark.asyncio
    async def test_swapped_provider(self, aggregate):
        providers = dict(DEFAULT_PROVIDERS)
        providers["governance"] = LiveProvider(lambda _: [_item(10, True)])

        outcome = ScoringEngine(providers=providers).score(aggregate)
        governance = next(c for c in outcome.categories if c.id == "governance")

        assert governance.score == 100

    def test_missing_provider(self):
        with pytest.raises(ValueError, match="governance"):
            ScoringEngine(providers={})

    @pytest.mark.asyncio
    async def test_zero_weight_definitions(self, aggregate):
        definitions = [
            CategoryDefinition(id=d.id, name=d.name, description=d.description, weight=0)
            for d in CATEGORY_DEFINITIONS
        ]
        outcome = ScoringEngine(definitions=definitions).score(aggregate)

        assert outcome.overall_score == 0
        assert outcome.overall_grade == Grade.F

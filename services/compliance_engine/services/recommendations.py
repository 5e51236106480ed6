"""
Recommendation Generator
========================

Ranked remediation actions from category gaps and aggregate statistics.

Rules:
- category score below 70: its first two incomplete items, high priority
- otherwise: its first incomplete item, medium priority
- expired DBS checks: high priority, +5 points each up to +20
- income records needing a compliance review: high priority, +10 points
- activity in high-risk countries: medium priority, +5 points

The list is stably sorted by priority, then cut to the limit.

Version: 0.1.0
"""

from collections.abc import Sequence

from services.compliance_engine.services.aggregator import AggregateResult
from shared.models.compliance import (
    ComplianceCategory,
    ComplianceItem,
    ComplianceRecommendation,
    Priority,
)


LOW_SCORE_THRESHOLD = 70
DEFAULT_LIMIT = 5

EXPIRED_CHECK_POINTS = 5
EXPIRED_CHECK_CAP = 20


def _item_recommendation(
    category: ComplianceCategory,
    item: ComplianceItem,
    priority: Priority,
) -> ComplianceRecommendation:
    return ComplianceRecommendation(
        priority=priority,
        category=category.name,
        title=item.name,
        description=item.description,
        action=f"Complete: {item.name}",
        impact=f"+{item.points} points",
    )


def category_recommendations(
    categories: Sequence[ComplianceCategory],
) -> list[ComplianceRecommendation]:
    """Recommendations for incomplete items, in category order."""
    recommendations: list[ComplianceRecommendation] = []
    for category in categories:
        incomplete = category.incomplete_items
        if not incomplete:
            continue
        if category.score < LOW_SCORE_THRESHOLD:
            recommendations.extend(
                _item_recommendation(category, item, Priority.HIGH) for item in incomplete[:2]
            )
        else:
            recommendations.append(_item_recommendation(category, incomplete[0], Priority.MEDIUM))
    return recommendations


def stat_recommendations(aggregate: AggregateResult) -> list[ComplianceRecommendation]:
    """Recommendations driven by aggregated record statistics."""
    recommendations: list[ComplianceRecommendation] = []

    expired = aggregate.safeguarding.checks_expired
    if expired > 0:
        recommendations.append(ComplianceRecommendation(
            priority=Priority.HIGH,
            category="Safeguarding",
            title="Expired DBS Checks",
            description=f"{expired} DBS checks have expired",
            action="Renew expired DBS checks immediately",
            impact=f"+{min(expired * EXPIRED_CHECK_POINTS, EXPIRED_CHECK_CAP)} points",
        ))

    needing_review = aggregate.fundraising.records_requiring_review
    if needing_review > 0:
        recommendations.append(ComplianceRecommendation(
            priority=Priority.HIGH,
            category="Fundraising Standards",
            title="Compliance Checks Needed",
            description=f"{needing_review} activities need compliance checks",
            action="Complete compliance checks for active fundraising",
            impact="+10 points",
        ))

    high_risk = aggregate.overseas.high_risk_activity_count
    if high_risk > 0:
        recommendations.append(ComplianceRecommendation(
            priority=Priority.MEDIUM,
            category="Regulatory Compliance",
            title="High Risk Overseas Activities",
            description=f"{high_risk} high-risk overseas activities",
            action="Review and mitigate risks for overseas operations",
            impact="+5 points",
        ))

    return recommendations


def rank_recommendations(
    recommendations: Sequence[ComplianceRecommendation],
    limit: int = DEFAULT_LIMIT,
) -> list[ComplianceRecommendation]:
    """Stable sort by priority, then keep the first ``limit``."""
    return sorted(recommendations, key=lambda r: r.priority.rank)[:limit]


def generate_recommendations(
    categories: Sequence[ComplianceCategory],
    aggregate: AggregateResult,
    limit: int = DEFAULT_LIMIT,
) -> list[ComplianceRecommendation]:
    """Category gaps first, then stat-driven items, ranked and capped."""
    return rank_recommendations(
        [*category_recommendations(categories), *stat_recommendations(aggregate)],
        limit=limit,
    )

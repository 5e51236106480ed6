"""
Category Data Providers
=======================

Each scoring category gets its items from a provider. A provider is either
live (derives item completion from aggregated records) or a static
placeholder (fixed completion data until the category has a record source).

Live today: safeguarding, fundraising.
Placeholder today: governance, financial, regulatory, data protection.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType

from services.compliance_engine.services.aggregator import AggregateResult
from shared.models.compliance import ComplianceItem


# Share of tracked people that must hold a valid check for the item to count
VALID_CHECK_TARGET = 0.95


class CategoryDataProvider(ABC):
    """Supplies the items of one scoring category."""

    live: bool = False

    @abstractmethod
    def items(self, aggregate: AggregateResult) -> list[ComplianceItem]:
        """Items for the category, in display order."""


class StaticPlaceholderProvider(CategoryDataProvider):
    """Fixed items, independent of the organization's records."""

    live = False

    def __init__(self, items: Sequence[ComplianceItem]) -> None:
        self._items = tuple(items)

    def items(self, aggregate: AggregateResult) -> list[ComplianceItem]:
        return list(self._items)


class LiveProvider(CategoryDataProvider):
    """Items derived from aggregated records."""

    live = True

    def __init__(self, derive: Callable[[AggregateResult], Sequence[ComplianceItem]]) -> None:
        self._derive = derive

    def items(self, aggregate: AggregateResult) -> list[ComplianceItem]:
        return list(self._derive(aggregate))


# =============================================================================
# Live derivations
# =============================================================================


def safeguarding_items(aggregate: AggregateResult) -> list[ComplianceItem]:
    """DBS coverage and training come from records; policy and lead are placeholders."""
    stats = aggregate.safeguarding
    return [
        ComplianceItem(
            id="dbs-checks",
            name="DBS Checks",
            description="All eligible staff and volunteers have valid DBS checks",
            points=40,
            completed=stats.total_people > 0 and stats.valid_check_ratio >= VALID_CHECK_TARGET,
        ),
        ComplianceItem(
            id="safeguarding-policy",
            name="Safeguarding Policy",
            description="Comprehensive safeguarding policy in place",
            points=30,
            completed=True,
        ),
        ComplianceItem(
            id="safeguarding-training",
            name="Safeguarding Training",
            description="Annual safeguarding training for all staff",
            points=20,
            completed=stats.total_people > 0 and stats.training_completed == stats.total_people,
        ),
        ComplianceItem(
            id="designated-lead",
            name="Designated Safeguarding Lead",
            description="Appointed DSL with appropriate training",
            points=10,
            completed=True,
        ),
    ]


def fundraising_items(aggregate: AggregateResult) -> list[ComplianceItem]:
    """Activity compliance comes from income records; the rest are placeholders."""
    return [
        ComplianceItem(
            id="fundraising-regulation",
            name="Fundraising Regulation",
            description="Registered with Fundraising Regulator",
            points=25,
            completed=True,
        ),
        ComplianceItem(
            id="donor-charter",
            name="Donor Charter",
            description="Published donor charter and promises",
            points=20,
            completed=True,
        ),
        ComplianceItem(
            id="complaints-procedure",
            name="Complaints Procedure",
            description="Clear fundraising complaints procedure",
            points=20,
            completed=True,
        ),
        ComplianceItem(
            id="compliance-checks",
            name="Activity Compliance",
            description="All fundraising activities have compliance checks",
            points=35,
            completed=aggregate.fundraising.records_requiring_review == 0,
        ),
    ]


# =============================================================================
# Placeholder data
# =============================================================================


GOVERNANCE_PLACEHOLDER = (
    ComplianceItem(
        id="board-meetings",
        name="Regular Board Meetings",
        description="Hold at least 4 board meetings per year",
        points=25,
        completed=True,
    ),
    ComplianceItem(
        id="board-diversity",
        name="Board Diversity",
        description="Diverse board with varied skills and backgrounds",
        points=20,
        completed=True,
    ),
    ComplianceItem(
        id="conflict-policy",
        name="Conflict of Interest Policy",
        description="Up-to-date conflict of interest policy",
        points=15,
        completed=True,
    ),
    ComplianceItem(
        id="risk-register",
        name="Risk Register",
        description="Maintain and review risk register quarterly",
        points=20,
        completed=False,
    ),
    ComplianceItem(
        id="strategic-plan",
        name="Strategic Plan",
        description="Current 3-5 year strategic plan",
        points=20,
        completed=True,
    ),
)

FINANCIAL_PLACEHOLDER = (
    ComplianceItem(
        id="annual-accounts",
        name="Annual Accounts",
        description="File annual accounts on time",
        points=30,
        completed=True,
    ),
    ComplianceItem(
        id="reserves-policy",
        name="Reserves Policy",
        description="Maintain appropriate reserves (3-6 months)",
        points=25,
        completed=True,
    ),
    ComplianceItem(
        id="financial-controls",
        name="Financial Controls",
        description="Dual authorization for payments",
        points=20,
        completed=True,
    ),
    ComplianceItem(
        id="budget-monitoring",
        name="Budget Monitoring",
        description="Monthly budget vs actual reviews",
        points=15,
        completed=True,
    ),
    ComplianceItem(
        id="audit",
        name="Independent Audit",
        description="Annual independent audit or examination",
        points=10,
        completed=False,
    ),
)

REGULATORY_PLACEHOLDER = (
    ComplianceItem(
        id="annual-return",
        name="Annual Return",
        description="Submit annual return to Charity Commission",
        points=40,
        completed=True,
    ),
    ComplianceItem(
        id="trustees-update",
        name="Trustee Details",
        description="Keep trustee details up to date",
        points=20,
        completed=True,
    ),
    ComplianceItem(
        id="serious-incidents",
        name="Serious Incident Reporting",
        description="Report serious incidents promptly",
        points=20,
        completed=True,
    ),
    ComplianceItem(
        id="public-benefit",
        name="Public Benefit Reporting",
        description="Clear public benefit statement",
        points=20,
        completed=True,
    ),
)

DATA_PROTECTION_PLACEHOLDER = (
    ComplianceItem(
        id="privacy-policy",
        name="Privacy Policy",
        description="GDPR-compliant privacy policy",
        points=30,
        completed=True,
    ),
    ComplianceItem(
        id="data-register",
        name="Data Processing Register",
        description="Maintain register of processing activities",
        points=25,
        completed=True,
    ),
    ComplianceItem(
        id="consent-management",
        name="Consent Management",
        description="Proper consent records for communications",
        points=25,
        completed=True,
    ),
    ComplianceItem(
        id="data-breach-procedure",
        name="Data Breach Procedure",
        description="Documented data breach response procedure",
        points=20,
        completed=False,
    ),
)


DEFAULT_PROVIDERS: Mapping[str, CategoryDataProvider] = MappingProxyType({
    "governance": StaticPlaceholderProvider(GOVERNANCE_PLACEHOLDER),
    "financial": StaticPlaceholderProvider(FINANCIAL_PLACEHOLDER),
    "regulatory": StaticPlaceholderProvider(REGULATORY_PLACEHOLDER),
    "safeguarding": LiveProvider(safeguarding_items),
    "fundraising": LiveProvider(fundraising_items),
    "data": StaticPlaceholderProvider(DATA_PROTECTION_PLACEHOLDER),
})

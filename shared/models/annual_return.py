"""
Annual Return Models
====================

Aggregated per-domain summaries, the annual-return snapshot built from
them, and the field list projected from the snapshot.

Version: 0.1.0
"""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReturnSection(str, Enum):
    """Sections of the annual return."""

    ORGANISATION = "organisation"
    SAFEGUARDING = "safeguarding"
    OVERSEAS = "overseas"
    FUNDRAISING = "fundraising"

    @property
    def prefix(self) -> str:
        """Field id prefix used for this section."""
        return SECTION_PREFIXES[self]


SECTION_PREFIXES: dict[ReturnSection, str] = {
    ReturnSection.ORGANISATION: "a",
    ReturnSection.SAFEGUARDING: "b",
    ReturnSection.OVERSEAS: "c",
    ReturnSection.FUNDRAISING: "d",
}


class Impact(str, Enum):
    """How much a data gap affects the return."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class _Summary(BaseModel):
    model_config = ConfigDict(frozen=True)


# =============================================================================
# Safeguarding
# =============================================================================


class SafeguardingSection(_Summary):
    """Current safeguarding position (not scoped to a financial year)."""

    total_people: int = 0
    working_with_children: int = 0
    working_with_vulnerable_adults: int = 0
    checks_valid: int = 0
    checks_expired: int = 0
    training_completed: int = 0

    @property
    def valid_check_ratio(self) -> float:
        """Share of tracked people holding a valid check."""
        if self.total_people == 0:
            return 0.0
        return self.checks_valid / self.total_people


# =============================================================================
# Overseas
# =============================================================================


class CountrySpend(_Summary):
    """Spend in a single country."""

    country_code: str
    country_name: str
    total_spend: float = 0.0
    activity_count: int = 0
    is_high_risk: bool = False


class TransferMethodBreakdown(_Summary):
    """Spend sent by a single transfer method."""

    method: str
    amount: float = 0.0
    percentage: float = 0.0
    requires_explanation: bool = False


class OverseasSection(_Summary):
    """International activity for a financial year."""

    has_overseas_operations: bool = False
    total_spend: float = 0.0
    countries: tuple[CountrySpend, ...] = ()
    transfer_methods: tuple[TransferMethodBreakdown, ...] = ()
    partners_verified: int = 0
    partners_total: int = 0

    @property
    def high_risk_activity_count(self) -> int:
        """Number of activities in countries flagged high risk."""
        return sum(c.activity_count for c in self.countries if c.is_high_risk)


# =============================================================================
# Fundraising / income
# =============================================================================


class IncomeSourceBreakdown(_Summary):
    """Income received from a single source."""

    source: str
    amount: float = 0.0
    percentage: float = 0.0


class FundraisingSection(_Summary):
    """Income and fundraising for a financial year."""

    total_income: float = 0.0
    income_by_source: tuple[IncomeSourceBreakdown, ...] = ()
    highest_corporate_donation: float | None = None
    highest_individual_donation: float | None = None
    has_related_party_transactions: bool = False
    related_party_amount: float = 0.0
    fundraising_methods: tuple[str, ...] = ()
    uses_professional_fundraiser: bool = False
    record_count: int = 0
    records_requiring_review: int = 0


# =============================================================================
# Snapshot
# =============================================================================


class MissingField(_Summary):
    """A structural gap in the data behind the return."""

    section: ReturnSection
    field: str
    description: str
    required: bool
    impact: Impact


class AnnualReturnSnapshot(_Summary):
    """Everything known about an organization's annual return for a year."""

    organization_id: str
    charity_name: str
    charity_number: str | None = None
    financial_year: int
    financial_year_end: date | None = None
    safeguarding: SafeguardingSection
    overseas: OverseasSection
    fundraising: FundraisingSection
    generated_at: datetime
    completeness: int = Field(..., ge=0, le=100)
    missing_fields: tuple[MissingField, ...] = ()


class FieldMapping(_Summary):
    """One annual-return form field ready to display, copy or export."""

    field_id: str
    section_id: ReturnSection
    question_number: str
    label: str
    raw_value: Any = None
    display_value: str
    copy_value: str
    required: bool = False

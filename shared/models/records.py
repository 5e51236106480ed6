"""
Record Models
=============

Raw per-domain records read from the record store: organizations,
safeguarding (DBS) checks, income, overseas activities and partners,
plus the static country reference data.

All monetary amounts named ``*_base`` or ``amount`` on income records are
already converted into the base reporting currency.

Version: 0.1.0
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CheckType(str, Enum):
    """DBS check levels."""

    BASIC = "basic"
    STANDARD = "standard"
    ENHANCED = "enhanced"
    ENHANCED_BARRED = "enhanced_barred"


class IncomeSource(str, Enum):
    """Income categories used by the annual return."""

    DONATIONS_LEGACIES = "donations_legacies"
    CHARITABLE_ACTIVITIES = "charitable_activities"
    OTHER_TRADING = "other_trading"
    INVESTMENTS = "investments"
    OTHER = "other"


class DonorType(str, Enum):
    """Who an income record came from."""

    INDIVIDUAL = "individual"
    CORPORATE = "corporate"
    TRUST = "trust"
    GOVERNMENT = "government"
    OTHER = "other"


class FundraisingMethod(str, Enum):
    """How an income record was raised."""

    INDIVIDUAL_GIVING = "individual_giving"
    MAJOR_DONORS = "major_donors"
    CORPORATE = "corporate"
    TRUSTS_FOUNDATIONS = "trusts_foundations"
    EVENTS = "events"
    ONLINE = "online"
    DIRECT_MAIL = "direct_mail"
    TELEPHONE = "telephone"
    STREET = "street"
    LEGACIES = "legacies"
    TRADING = "trading"
    OTHER = "other"


class TransferMethod(str, Enum):
    """Ways money is moved to overseas operations."""

    BANK_TRANSFER = "bank_transfer"
    WIRE_TRANSFER = "wire_transfer"
    CRYPTOCURRENCY = "cryptocurrency"
    CASH_COURIER = "cash_courier"
    MONEY_SERVICE_BUSINESS = "money_service_business"
    MOBILE_MONEY = "mobile_money"
    INFORMAL_VALUE_TRANSFER = "informal_value_transfer"
    OTHER = "other"


class ActivityType(str, Enum):
    """Kinds of overseas activity."""

    HUMANITARIAN_AID = "humanitarian_aid"
    DEVELOPMENT = "development"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    EMERGENCY_RELIEF = "emergency_relief"
    CAPACITY_BUILDING = "capacity_building"
    ADVOCACY = "advocacy"
    OTHER = "other"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=False)


class Organization(_Record):
    """A registered charity."""

    id: str
    name: str
    charity_number: str | None = None
    financial_year_end: date | None = None


class SafeguardingRecord(_Record):
    """A person tracked for safeguarding with their DBS check."""

    id: str
    organization_id: str
    person_name: str
    role: str | None = None
    check_type: CheckType = CheckType.BASIC
    check_number: str | None = None
    issue_date: date | None = None
    expiry_date: date | None = None
    works_with_children: bool = False
    works_with_vulnerable_adults: bool = False
    training_completed: bool = False


class IncomeRecord(_Record):
    """A single income receipt for a financial year."""

    id: str
    organization_id: str
    source: IncomeSource
    amount: float = Field(..., ge=0)
    financial_year: int
    date_received: date | None = None
    donor_type: DonorType | None = None
    donor_name: str | None = None
    fundraising_method: FundraisingMethod | None = None
    is_related_party: bool = False
    uses_professional_fundraiser: bool = False

    @field_validator("is_related_party", "uses_professional_fundraiser", mode="before")
    @classmethod
    def null_is_false(cls, v: bool | None) -> bool:
        """Treat a NULL flag as unset."""
        return bool(v)


class OverseasActivity(_Record):
    """Money sent overseas for a charitable activity."""

    id: str
    organization_id: str
    activity_name: str
    activity_type: ActivityType = ActivityType.OTHER
    country_code: str = Field(..., min_length=2, max_length=2)
    amount: float = Field(..., ge=0)
    currency: str = "GBP"
    amount_base: float = Field(..., ge=0)
    transfer_method: TransferMethod
    transfer_date: date | None = None
    financial_year: int
    partner_id: str | None = None


class OverseasPartner(_Record):
    """A partner organization delivering overseas activity."""

    id: str
    organization_id: str
    name: str
    country_code: str | None = None
    is_active: bool = True
    registration_verified: bool = False


class CountryMetadata(_Record):
    """Static country reference data."""

    code: str
    name: str
    is_high_risk: bool = False

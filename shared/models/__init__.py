"""
Shared Models
=============

Pydantic models shared across the compliance services.

Models:
- Record models (Organization, SafeguardingRecord, IncomeRecord, ...)
- Compliance models (ComplianceCategory, ComplianceScoreResult, ...)
- Annual return models (AnnualReturnSnapshot, FieldMapping, ...)
- Common API envelopes (ErrorResponse, HealthResponse)
"""

from shared.models.annual_return import (
    SECTION_PREFIXES,
    AnnualReturnSnapshot,
    CountrySpend,
    FieldMapping,
    FundraisingSection,
    Impact,
    IncomeSourceBreakdown,
    MissingField,
    OverseasSection,
    ReturnSection,
    SafeguardingSection,
    TransferMethodBreakdown,
)
from shared.models.common import ErrorResponse, HealthResponse
from shared.models.compliance import (
    ComplianceCategory,
    ComplianceItem,
    ComplianceRecommendation,
    ComplianceScoreResult,
    Grade,
    Priority,
)
from shared.models.records import (
    ActivityType,
    CheckType,
    CountryMetadata,
    DonorType,
    FundraisingMethod,
    IncomeRecord,
    IncomeSource,
    Organization,
    OverseasActivity,
    OverseasPartner,
    SafeguardingRecord,
    TransferMethod,
)

__all__ = [
    # Records
    "ActivityType",
    "CheckType",
    "CountryMetadata",
    "DonorType",
    "FundraisingMethod",
    "IncomeRecord",
    "IncomeSource",
    "Organization",
    "OverseasActivity",
    "OverseasPartner",
    "SafeguardingRecord",
    "TransferMethod",
    # Compliance
    "ComplianceCategory",
    "ComplianceItem",
    "ComplianceRecommendation",
    "ComplianceScoreResult",
    "Grade",
    "Priority",
    # Annual return
    "SECTION_PREFIXES",
    "AnnualReturnSnapshot",
    "CountrySpend",
    "FieldMapping",
    "FundraisingSection",
    "Impact",
    "IncomeSourceBreakdown",
    "MissingField",
    "OverseasSection",
    "ReturnSection",
    "SafeguardingSection",
    "TransferMethodBreakdown",
    # Common
    "ErrorResponse",
    "HealthResponse",
]

"""
Missing Data Detection
======================

Flags structural gaps in the data behind the annual return. This is a
coarse proxy, not a per-field audit: completeness counts required gaps
against a fixed number of expected form fields.

Version: 0.1.0
"""

from shared.models.annual_return import (
    FundraisingSection,
    Impact,
    MissingField,
    OverseasSection,
    ReturnSection,
    SafeguardingSection,
)


# Approximate number of required annual-return fields
TOTAL_EXPECTED_FIELDS = 15


def detect_missing_fields(
    safeguarding: SafeguardingSection,
    overseas: OverseasSection,
    fundraising: FundraisingSection,
) -> list[MissingField]:
    """Structural gaps, in section order."""
    missing: list[MissingField] = []

    if safeguarding.total_people == 0:
        missing.append(MissingField(
            section=ReturnSection.SAFEGUARDING,
            field="dbs_records",
            description="No DBS records found",
            required=True,
            impact=Impact.HIGH,
        ))

    if overseas.has_overseas_operations and overseas.partners_verified == 0:
        missing.append(MissingField(
            section=ReturnSection.OVERSEAS,
            field="partners",
            description="Overseas activities recorded but no verified active partner organizations",
            required=False,
            impact=Impact.MEDIUM,
        ))

    if fundraising.record_count == 0:
        missing.append(MissingField(
            section=ReturnSection.FUNDRAISING,
            field="income",
            description="No income records for the financial year",
            required=True,
            impact=Impact.HIGH,
        ))

    return missing


def completeness_percentage(
    missing: list[MissingField],
    total_expected: int = TOTAL_EXPECTED_FIELDS,
) -> int:
    """Share of expected fields not blocked by a required gap, 0-100."""
    if total_expected <= 0:
        return 0
    required_missing = sum(1 for m in missing if m.required)
    completed = max(total_expected - required_missing, 0)
    return int(completed * 100 / total_expected + 0.5)

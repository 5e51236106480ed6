"""
Classification Predicates
=========================

Small pure predicates used across aggregation, scoring and completeness.
Each rule lives here once so it can be tested in isolation.

Version: 0.1.0
"""

from collections.abc import Mapping
from datetime import date

from shared.models.records import (
    CountryMetadata,
    DonorType,
    IncomeRecord,
    SafeguardingRecord,
    TransferMethod,
)


TRUSTED_TRANSFER_METHODS: frozenset[TransferMethod] = frozenset({
    TransferMethod.BANK_TRANSFER,
    TransferMethod.WIRE_TRANSFER,
})

# Single receipts above this amount (base currency) need a compliance review
COMPLIANCE_REVIEW_THRESHOLD = 100_000


def requires_explanation(method: TransferMethod | str) -> bool:
    """A transfer method outside the trusted set must be explained on the return."""
    try:
        return TransferMethod(method) not in TRUSTED_TRANSFER_METHODS
    except ValueError:
        return True


def is_high_risk_country(
    country_code: str,
    countries: Mapping[str, CountryMetadata],
) -> bool:
    """Reference-data lookup; unknown countries are not flagged."""
    country = countries.get(country_code.upper())
    return bool(country and country.is_high_risk)


def requires_compliance_review(record: IncomeRecord) -> bool:
    """
    Whether an income record needs a fundraising compliance review.

    Any one of: amount over the threshold, a corporate donor, or a
    related-party transaction.
    """
    return (
        record.amount > COMPLIANCE_REVIEW_THRESHOLD
        or record.donor_type == DonorType.CORPORATE
        or record.is_related_party
    )


def is_check_valid(record: SafeguardingRecord, today: date) -> bool:
    """A check is valid until (but not on) its expiry date."""
    return record.expiry_date is not None and record.expiry_date > today


def is_check_expired(record: SafeguardingRecord, today: date) -> bool:
    """A check with no expiry date is pending, not expired."""
    return record.expiry_date is not None and record.expiry_date <= today


def raised_by_professional_fundraiser(record: IncomeRecord) -> bool:
    """Income raised through a paid professional fundraiser must be disclosed."""
    return record.uses_professional_fundraiser

"""
Compliance Aggregator
=====================

Reduces raw per-domain records into summary statistics.

Domains:
- Safeguarding: people tracked, DBS check validity, training (current state)
- Overseas: spend by country and transfer method, partner verification
- Fundraising: income by source, highest donations, related parties

The repository reads are independent and run concurrently. Any failed or
cancelled read fails the whole aggregation; a domain is never replaced
with empty data, since a false zero would look like a genuine gap.

Version: 0.1.0
"""

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime

from services.compliance_engine.classification import (
    is_check_expired,
    is_check_valid,
    is_high_risk_country,
    raised_by_professional_fundraiser,
    requires_compliance_review,
    requires_explanation,
)
from services.compliance_engine.exceptions import (
    ComplianceEngineError,
    InvalidRequestError,
    UpstreamReadError,
)
from services.compliance_engine.repository.base import RecordRepository
from shared.logging import get_logger
from shared.models.annual_return import (
    CountrySpend,
    FundraisingSection,
    IncomeSourceBreakdown,
    OverseasSection,
    SafeguardingSection,
    TransferMethodBreakdown,
)
from shared.models.records import (
    CountryMetadata,
    DonorType,
    IncomeRecord,
    Organization,
    OverseasActivity,
    OverseasPartner,
    SafeguardingRecord,
)


logger = get_logger(__name__)


@dataclass(frozen=True)
class AggregateResult:
    """The three domain summaries for one organization and year."""

    organization: Organization
    financial_year: int
    as_of: datetime
    safeguarding: SafeguardingSection
    overseas: OverseasSection
    fundraising: FundraisingSection


# =============================================================================
# Pure reductions
# =============================================================================


def percentage_of(amount: float, total: float) -> float:
    """Share of ``total`` as a percentage; 0 when there is no total."""
    if total <= 0:
        return 0.0
    return amount * 100 / total


def summarize_safeguarding(
    records: Sequence[SafeguardingRecord],
    today: date,
) -> SafeguardingSection:
    """Count people, check validity and training as of ``today``."""
    return SafeguardingSection(
        total_people=len(records),
        working_with_children=sum(1 for r in records if r.works_with_children),
        working_with_vulnerable_adults=sum(1 for r in records if r.works_with_vulnerable_adults),
        checks_valid=sum(1 for r in records if is_check_valid(r, today)),
        checks_expired=sum(1 for r in records if is_check_expired(r, today)),
        training_completed=sum(1 for r in records if r.training_completed),
    )


def summarize_overseas(
    activities: Sequence[OverseasActivity],
    partners: Sequence[OverseasPartner],
    countries: Iterable[CountryMetadata],
) -> OverseasSection:
    """Break overseas spend down by country and transfer method."""
    reference = {c.code.upper(): c for c in countries}

    by_country: dict[str, dict[str, float | int]] = {}
    by_method: dict[str, float] = {}

    for activity in activities:
        code = activity.country_code.upper()
        entry = by_country.setdefault(code, {"spend": 0.0, "count": 0})
        entry["spend"] += activity.amount_base
        entry["count"] += 1

        method = activity.transfer_method.value
        by_method[method] = by_method.get(method, 0.0) + activity.amount_base

    total_spend = sum(float(e["spend"]) for e in by_country.values())

    country_rows = [
        CountrySpend(
            country_code=code,
            country_name=reference[code].name if code in reference else code,
            total_spend=float(entry["spend"]),
            activity_count=int(entry["count"]),
            is_high_risk=is_high_risk_country(code, reference),
        )
        for code, entry in by_country.items()
    ]
    method_rows = [
        TransferMethodBreakdown(
            method=method,
            amount=amount,
            percentage=percentage_of(amount, total_spend),
            requires_explanation=requires_explanation(method),
        )
        for method, amount in by_method.items()
    ]

    active_partners = [p for p in partners if p.is_active]

    return OverseasSection(
        has_overseas_operations=len(activities) > 0,
        total_spend=total_spend,
        countries=sorted(country_rows, key=lambda c: c.total_spend, reverse=True),
        transfer_methods=sorted(method_rows, key=lambda m: m.amount, reverse=True),
        partners_verified=sum(1 for p in active_partners if p.registration_verified),
        partners_total=len(active_partners),
    )


def summarize_fundraising(records: Sequence[IncomeRecord]) -> FundraisingSection:
    """Total the year's income and pick out disclosure items."""
    by_source: dict[str, float] = {}
    methods: list[str] = []
    highest_corporate: float | None = None
    highest_individual: float | None = None
    related_party_amount = 0.0
    has_related_party = False

    for record in records:
        source = record.source.value
        by_source[source] = by_source.get(source, 0.0) + record.amount

        if record.donor_type == DonorType.CORPORATE:
            if highest_corporate is None or record.amount > highest_corporate:
                highest_corporate = record.amount
        elif record.donor_type == DonorType.INDIVIDUAL:
            if highest_individual is None or record.amount > highest_individual:
                highest_individual = record.amount

        if record.is_related_party:
            has_related_party = True
            related_party_amount += record.amount

        if record.fundraising_method and record.fundraising_method.value not in methods:
            methods.append(record.fundraising_method.value)

    total_income = sum(by_source.values())
    source_rows = [
        IncomeSourceBreakdown(
            source=source,
            amount=amount,
            percentage=percentage_of(amount, total_income),
        )
        for source, amount in by_source.items()
    ]

    return FundraisingSection(
        total_income=total_income,
        income_by_source=sorted(source_rows, key=lambda s: s.amount, reverse=True),
        highest_corporate_donation=highest_corporate,
        highest_individual_donation=highest_individual,
        has_related_party_transactions=has_related_party,
        related_party_amount=related_party_amount,
        fundraising_methods=methods,
        uses_professional_fundraiser=any(raised_by_professional_fundraiser(r) for r in records),
        record_count=len(records),
        records_requiring_review=sum(1 for r in records if requires_compliance_review(r)),
    )


# =============================================================================
# Aggregator
# =============================================================================


class Aggregator:
    """
    Fetches an organization's records and reduces them to summaries.

    Example:
        >>> aggregator = Aggregator(repository)
        >>> result = await aggregator.aggregate("org-1", 2024)
        >>> result.fundraising.total_income
    """

    def __init__(self, repository: RecordRepository) -> None:
        self.repository = repository

    async def aggregate(
        self,
        organization_id: str,
        financial_year: int,
        as_of: datetime | None = None,
    ) -> AggregateResult:
        """
        Aggregate all three domains for an organization.

        Args:
            organization_id: Organization to aggregate
            financial_year: Year scoping income and overseas records
            as_of: Instant used for check validity (defaults to now, UTC)

        Returns:
            AggregateResult with the three summaries

        Raises:
            InvalidRequestError: Empty organization id or non-positive year
            NotFoundError: Unknown organization
            UpstreamReadError: Any read failed
        """
        validate_request(organization_id, financial_year)
        as_of = as_of or datetime.now(UTC)

        logger.debug(
            "aggregation_started",
            organization_id=organization_id,
            financial_year=financial_year,
        )

        repo = self.repository
        try:
            (
                organization,
                safeguarding_records,
                income_records,
                activities,
                partners,
                countries,
            ) = await asyncio.gather(
                repo.fetch_organization(organization_id),
                repo.fetch_safeguarding_records(organization_id),
                repo.fetch_income_records(organization_id, financial_year),
                repo.fetch_overseas_activities(organization_id, financial_year),
                repo.fetch_overseas_partners(organization_id),
                repo.fetch_country_metadata(),
            )
        except ComplianceEngineError as e:
            logger.warning(
                "aggregation_failed",
                organization_id=organization_id,
                financial_year=financial_year,
                error_type=type(e).__name__,
                error=e.message,
            )
            raise
        except Exception as e:
            logger.error(
                "aggregation_failed",
                organization_id=organization_id,
                financial_year=financial_year,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise UpstreamReadError(
                "Failed to read compliance records",
                details={"organization_id": organization_id},
            ) from e

        result = AggregateResult(
            organization=organization,
            financial_year=financial_year,
            as_of=as_of,
            safeguarding=summarize_safeguarding(safeguarding_records, as_of.date()),
            overseas=summarize_overseas(activities, partners, countries),
            fundraising=summarize_fundraising(income_records),
        )

        logger.info(
            "aggregation_completed",
            organization_id=organization_id,
            financial_year=financial_year,
            safeguarding_records=result.safeguarding.total_people,
            income_records=result.fundraising.record_count,
            overseas_activities=len(activities),
        )
        return result


def validate_request(organization_id: str, financial_year: int) -> None:
    """Reject malformed aggregation input."""
    if not organization_id or not organization_id.strip():
        raise InvalidRequestError("Organization id must not be empty")
    if isinstance(financial_year, bool) or not isinstance(financial_year, int) or financial_year <= 0:
        raise InvalidRequestError(
            f"Invalid financial year: {financial_year}",
            details={"financial_year": financial_year},
        )

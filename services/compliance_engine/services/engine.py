"""
Compliance Engine
=================

Entry point for the presentation layer. Wires the repository, aggregator,
scoring engine, recommendation generator, missing-data detector, field
mapper and export encoders together.

Results are immutable values: recomputing with changed records yields an
independent result.

Version: 0.1.0
"""

import calendar
from collections.abc import Sequence
from datetime import UTC, datetime

from services.compliance_engine.repository.base import RecordRepository
from services.compliance_engine.services.aggregator import Aggregator
from services.compliance_engine.services.completeness import (
    completeness_percentage,
    detect_missing_fields,
)
from services.compliance_engine.services.exporters import (
    ExportEncoding,
    encode_fields,
    encode_snapshot,
)
from services.compliance_engine.services.field_mapper import (
    FieldMapper,
    filter_fields_by_section,
    group_fields_by_section,
)
from services.compliance_engine.services.recommendations import generate_recommendations
from services.compliance_engine.services.scoring import ScoringEngine
from shared.config import ReportingSettings, settings
from shared.logging import get_logger
from shared.models.annual_return import (
    AnnualReturnSnapshot,
    FieldMapping,
    ReturnSection,
)
from shared.models.compliance import ComplianceScoreResult


logger = get_logger(__name__)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class ComplianceEngine:
    """
    Compliance scoring and annual-return reporting for one record store.

    Example:
        >>> engine = ComplianceEngine(PostgresRecordRepository())
        >>> result = await engine.compute_compliance_score("org-1")
        >>> result.overall_grade
        <Grade.B: 'B'>
    """

    def __init__(
        self,
        repository: RecordRepository,
        scoring_engine: ScoringEngine | None = None,
        reporting: ReportingSettings | None = None,
    ) -> None:
        self.repository = repository
        self.aggregator = Aggregator(repository)
        self.scoring_engine = scoring_engine or ScoringEngine()
        self.reporting = reporting or settings.reporting
        self.field_mapper = FieldMapper(currency_symbol=self.reporting.currency_symbol)

    async def compute_compliance_score(
        self,
        organization_id: str,
        financial_year: int | None = None,
        as_of: datetime | None = None,
    ) -> ComplianceScoreResult:
        """
        Score an organization.

        Args:
            organization_id: Organization to score
            financial_year: Year for income and overseas records
                (defaults to the calendar year of ``as_of``)
            as_of: Scoring instant (defaults to now, UTC)

        Raises:
            InvalidRequestError, NotFoundError, UpstreamReadError
        """
        as_of = as_of or datetime.now(UTC)
        year = financial_year if financial_year is not None else as_of.year

        aggregate = await self.aggregator.aggregate(organization_id, year, as_of=as_of)
        outcome = self.scoring_engine.score(aggregate)
        recommendations = generate_recommendations(
            outcome.categories,
            aggregate,
            limit=self.reporting.recommendation_limit,
        )

        result = ComplianceScoreResult(
            organization_id=organization_id,
            overall_score=outcome.overall_score,
            overall_grade=outcome.overall_grade,
            categories=outcome.categories,
            last_updated=as_of,
            next_review_date=add_months(as_of, self.reporting.review_interval_months),
            recommendations=recommendations,
        )

        logger.info(
            "compliance_score_computed",
            organization_id=organization_id,
            financial_year=year,
            overall_score=result.overall_score,
            grade=result.overall_grade.value,
            recommendations=len(recommendations),
        )
        return result

    async def build_annual_return_snapshot(
        self,
        organization_id: str,
        financial_year: int,
        as_of: datetime | None = None,
    ) -> AnnualReturnSnapshot:
        """
        Build the annual-return snapshot for a financial year.

        Raises:
            InvalidRequestError, NotFoundError, UpstreamReadError
        """
        aggregate = await self.aggregator.aggregate(organization_id, financial_year, as_of=as_of)
        missing = detect_missing_fields(
            aggregate.safeguarding,
            aggregate.overseas,
            aggregate.fundraising,
        )
        organization = aggregate.organization

        snapshot = AnnualReturnSnapshot(
            organization_id=organization.id,
            charity_name=organization.name,
            charity_number=organization.charity_number,
            financial_year=financial_year,
            financial_year_end=organization.financial_year_end,
            safeguarding=aggregate.safeguarding,
            overseas=aggregate.overseas,
            fundraising=aggregate.fundraising,
            generated_at=aggregate.as_of,
            completeness=completeness_percentage(missing),
            missing_fields=missing,
        )

        logger.info(
            "annual_return_snapshot_built",
            organization_id=organization_id,
            financial_year=financial_year,
            completeness=snapshot.completeness,
            missing_fields=[m.field for m in missing],
        )
        return snapshot

    # -------------------------------------------------------------------------
    # Pure projections
    # -------------------------------------------------------------------------

    def map_snapshot_to_fields(self, snapshot: AnnualReturnSnapshot) -> list[FieldMapping]:
        return self.field_mapper.map(snapshot)

    @staticmethod
    def filter_fields_by_section(
        fields: Sequence[FieldMapping],
        section_id: ReturnSection | str,
    ) -> list[FieldMapping]:
        return filter_fields_by_section(fields, section_id)

    @staticmethod
    def group_fields_by_section(
        fields: Sequence[FieldMapping],
    ) -> dict[ReturnSection, list[FieldMapping]]:
        return group_fields_by_section(fields)

    @staticmethod
    def encode_fields(fields: Sequence[FieldMapping], encoding: ExportEncoding | str) -> str:
        return encode_fields(fields, encoding)

    def encode_snapshot(self, snapshot: AnnualReturnSnapshot) -> str:
        return encode_snapshot(snapshot, self.map_snapshot_to_fields(snapshot))

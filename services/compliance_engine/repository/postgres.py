"""
PostgreSQL Record Repository
============================

Reads compliance records with SQLAlchemy ``text()`` queries. Each read
opens its own session so the aggregator can run reads concurrently.

Soft-deleted rows (``deleted_at IS NOT NULL``) are never returned.

Version: 0.1.0
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from services.compliance_engine.exceptions import NotFoundError, UpstreamReadError
from services.compliance_engine.repository.base import RecordRepository
from shared.database.postgres import PostgresClient
from shared.logging import get_logger
from shared.models.records import (
    CountryMetadata,
    IncomeRecord,
    Organization,
    OverseasActivity,
    OverseasPartner,
    SafeguardingRecord,
)


logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


ORGANIZATION_QUERY = text("""
    SELECT id, name, charity_number, financial_year_end
    FROM organizations
    WHERE id = :organization_id AND deleted_at IS NULL
""")

SAFEGUARDING_QUERY = text("""
    SELECT
        id, organization_id, person_name, role,
        dbs_type AS check_type, dbs_number AS check_number,
        issue_date, expiry_date,
        works_with_children, works_with_vulnerable_adults, training_completed
    FROM safeguarding_records
    WHERE organization_id = :organization_id AND deleted_at IS NULL
    ORDER BY created_at
""")

INCOME_QUERY = text("""
    SELECT
        id, organization_id, source, amount, financial_year, date_received,
        donor_type, donor_name, fundraising_method, is_related_party,
        uses_professional_fundraiser
    FROM income_records
    WHERE organization_id = :organization_id
      AND financial_year = :financial_year
      AND deleted_at IS NULL
    ORDER BY date_received, created_at
""")

OVERSEAS_QUERY = text("""
    SELECT
        id, organization_id, activity_name, activity_type, country_code,
        amount, currency, amount_gbp AS amount_base, transfer_method,
        transfer_date, financial_year, partner_id
    FROM overseas_activities
    WHERE organization_id = :organization_id
      AND financial_year = :financial_year
      AND deleted_at IS NULL
    ORDER BY transfer_date, created_at
""")

PARTNERS_QUERY = text("""
    SELECT id, organization_id, name, country_code, is_active, registration_verified
    FROM overseas_partners
    WHERE organization_id = :organization_id AND deleted_at IS NULL
    ORDER BY created_at
""")

COUNTRIES_QUERY = text("""
    SELECT code, name, is_high_risk
    FROM countries
    ORDER BY code
""")


class PostgresRecordRepository(RecordRepository):
    """Record repository backed by the PostgreSQL record store."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        """
        Initialize the repository.

        Args:
            session_factory: Session factory (defaults to the shared client's)
        """
        self._session_factory = session_factory

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = PostgresClient.get_session_factory()
        return self._session_factory

    async def _fetch_rows(
        self,
        read_name: str,
        query: Any,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        try:
            async with self._sessions()() as session:
                result = await session.execute(query, dict(params or {}))
                return [dict(row._mapping) for row in result.fetchall()]
        except SQLAlchemyError as e:
            logger.error("record_read_failed", read=read_name, error=str(e))
            raise UpstreamReadError(
                f"Failed to read {read_name}",
                details={"read": read_name},
            ) from e

    @staticmethod
    def _to_models(model: type[RecordT], rows: list[dict[str, Any]]) -> list[RecordT]:
        return [model.model_validate(_stringify_ids(row)) for row in rows]

    async def fetch_organization(self, organization_id: str) -> Organization:
        rows = await self._fetch_rows(
            "organization",
            ORGANIZATION_QUERY,
            {"organization_id": organization_id},
        )
        if not rows:
            raise NotFoundError(
                f"Organization not found: {organization_id}",
                details={"organization_id": organization_id},
            )
        return Organization.model_validate(_stringify_ids(rows[0]))

    async def fetch_safeguarding_records(
        self,
        organization_id: str,
    ) -> list[SafeguardingRecord]:
        rows = await self._fetch_rows(
            "safeguarding_records",
            SAFEGUARDING_QUERY,
            {"organization_id": organization_id},
        )
        return self._to_models(SafeguardingRecord, rows)

    async def fetch_income_records(
        self,
        organization_id: str,
        financial_year: int,
    ) -> list[IncomeRecord]:
        rows = await self._fetch_rows(
            "income_records",
            INCOME_QUERY,
            {"organization_id": organization_id, "financial_year": financial_year},
        )
        return self._to_models(IncomeRecord, rows)

    async def fetch_overseas_activities(
        self,
        organization_id: str,
        financial_year: int,
    ) -> list[OverseasActivity]:
        rows = await self._fetch_rows(
            "overseas_activities",
            OVERSEAS_QUERY,
            {"organization_id": organization_id, "financial_year": financial_year},
        )
        return self._to_models(OverseasActivity, rows)

    async def fetch_overseas_partners(
        self,
        organization_id: str,
    ) -> list[OverseasPartner]:
        rows = await self._fetch_rows(
            "overseas_partners",
            PARTNERS_QUERY,
            {"organization_id": organization_id},
        )
        return self._to_models(OverseasPartner, rows)

    async def fetch_country_metadata(self) -> list[CountryMetadata]:
        rows = await self._fetch_rows("countries", COUNTRIES_QUERY)
        return self._to_models(CountryMetadata, rows)


def _stringify_ids(row: dict[str, Any]) -> dict[str, Any]:
    """UUID primary/foreign keys come back as UUID objects; models use str."""
    return {
        key: str(value) if value is not None and (key == "id" or key.endswith("_id")) else value
        for key, value in row.items()
    }

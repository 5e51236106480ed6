"""
In-Memory Record Repository
===========================

Dict-backed repository for tests and local tooling. Reads can be told to
fail so callers can exercise all-or-nothing aggregation.

Version: 0.1.0
"""

import asyncio
from collections import defaultdict
from collections.abc import Iterable

from services.compliance_engine.exceptions import NotFoundError, UpstreamReadError
from services.compliance_engine.repository.base import RecordRepository
from shared.models.records import (
    CountryMetadata,
    IncomeRecord,
    Organization,
    OverseasActivity,
    OverseasPartner,
    SafeguardingRecord,
)


class InMemoryRecordRepository(RecordRepository):
    """
    Repository holding records in memory.

    Example:
        >>> repo = InMemoryRecordRepository()
        >>> repo.add_organization(Organization(id="org-1", name="Hope Trust"))
        >>> repo.add_income_records([...])
    """

    def __init__(self, countries: Iterable[CountryMetadata] = ()) -> None:
        self._organizations: dict[str, Organization] = {}
        self._safeguarding: dict[str, list[SafeguardingRecord]] = defaultdict(list)
        self._income: dict[str, list[IncomeRecord]] = defaultdict(list)
        self._overseas: dict[str, list[OverseasActivity]] = defaultdict(list)
        self._partners: dict[str, list[OverseasPartner]] = defaultdict(list)
        self._countries: list[CountryMetadata] = list(countries)
        self._failing_reads: set[str] = set()
        self.read_log: list[str] = []

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    def add_organization(self, organization: Organization) -> None:
        self._organizations[organization.id] = organization

    def add_safeguarding_records(self, records: Iterable[SafeguardingRecord]) -> None:
        for record in records:
            self._safeguarding[record.organization_id].append(record)

    def add_income_records(self, records: Iterable[IncomeRecord]) -> None:
        for record in records:
            self._income[record.organization_id].append(record)

    def add_overseas_activities(self, activities: Iterable[OverseasActivity]) -> None:
        for activity in activities:
            self._overseas[activity.organization_id].append(activity)

    def add_overseas_partners(self, partners: Iterable[OverseasPartner]) -> None:
        for partner in partners:
            self._partners[partner.organization_id].append(partner)

    def fail_read(self, read_name: str) -> None:
        """Make the named read (e.g. ``"income_records"``) raise UpstreamReadError."""
        self._failing_reads.add(read_name)

    # -------------------------------------------------------------------------
    # RecordRepository
    # -------------------------------------------------------------------------

    async def _enter(self, read_name: str) -> None:
        self.read_log.append(read_name)
        # Yield so concurrent reads interleave as they would against a database
        await asyncio.sleep(0)
        if read_name in self._failing_reads:
            raise UpstreamReadError(
                f"Read failed: {read_name}",
                details={"read": read_name},
            )

    async def fetch_organization(self, organization_id: str) -> Organization:
        await self._enter("organization")
        try:
            return self._organizations[organization_id]
        except KeyError:
            raise NotFoundError(
                f"Organization not found: {organization_id}",
                details={"organization_id": organization_id},
            ) from None

    async def fetch_safeguarding_records(
        self,
        organization_id: str,
    ) -> list[SafeguardingRecord]:
        await self._enter("safeguarding_records")
        return list(self._safeguarding.get(organization_id, []))

    async def fetch_income_records(
        self,
        organization_id: str,
        financial_year: int,
    ) -> list[IncomeRecord]:
        await self._enter("income_records")
        return [
            r for r in self._income.get(organization_id, [])
            if r.financial_year == financial_year
        ]

    async def fetch_overseas_activities(
        self,
        organization_id: str,
        financial_year: int,
    ) -> list[OverseasActivity]:
        await self._enter("overseas_activities")
        return [
            a for a in self._overseas.get(organization_id, [])
            if a.financial_year == financial_year
        ]

    async def fetch_overseas_partners(
        self,
        organization_id: str,
    ) -> list[OverseasPartner]:
        await self._enter("overseas_partners")
        return list(self._partners.get(organization_id, []))

    async def fetch_country_metadata(self) -> list[CountryMetadata]:
        await self._enter("countries")
        return list(self._countries)

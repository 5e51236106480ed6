"""
Record Repository Contract
==========================

Read access to the per-domain records the engine aggregates. Every read
either returns plain records or raises ``NotFoundError`` /
``UpstreamReadError``.

Version: 0.1.0
"""

from abc import ABC, abstractmethod

from shared.models.records import (
    CountryMetadata,
    IncomeRecord,
    Organization,
    OverseasActivity,
    OverseasPartner,
    SafeguardingRecord,
)


class RecordRepository(ABC):
    """
    Read-only source of compliance records, scoped by organization.

    Implementations must allow the reads to run concurrently.
    """

    @abstractmethod
    async def fetch_organization(self, organization_id: str) -> Organization:
        """Get the organization; raise NotFoundError if it does not exist."""

    @abstractmethod
    async def fetch_safeguarding_records(
        self,
        organization_id: str,
    ) -> list[SafeguardingRecord]:
        """All current safeguarding records."""

    @abstractmethod
    async def fetch_income_records(
        self,
        organization_id: str,
        financial_year: int,
    ) -> list[IncomeRecord]:
        """Income records for one financial year."""

    @abstractmethod
    async def fetch_overseas_activities(
        self,
        organization_id: str,
        financial_year: int,
    ) -> list[OverseasActivity]:
        """Overseas activities for one financial year."""

    @abstractmethod
    async def fetch_overseas_partners(
        self,
        organization_id: str,
    ) -> list[OverseasPartner]:
        """All overseas partners, active or not."""

    @abstractmethod
    async def fetch_country_metadata(self) -> list[CountryMetadata]:
        """Static country reference data."""

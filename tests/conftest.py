"""
Test Configuration
==================

Pytest fixtures for compliance engine tests.

The sample organization is built so that every figure is easy to check by
hand: four people (one valid check, two expired, one pending), income of
10,000 across two sources and overseas spend of 10,000 across two
countries and three transfer methods.
"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"

from services.compliance_engine.repository import InMemoryRecordRepository  # noqa: E402
from services.compliance_engine.services.engine import ComplianceEngine  # noqa: E402
from shared.models.records import (  # noqa: E402
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


ORG_ID = "org-1"
FINANCIAL_YEAR = 2024


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


# =============================================================================
# Records
# =============================================================================


@pytest.fixture
def as_of() -> datetime:
    """Fixed evaluation instant."""
    return datetime(2024, 6, 30, 12, 0, tzinfo=UTC)


@pytest.fixture
def organization() -> Organization:
    return Organization(
        id=ORG_ID,
        name="Hope Trust",
        charity_number="1234567",
        financial_year_end=date(2025, 3, 31),
    )


@pytest.fixture
def countries() -> list[CountryMetadata]:
    return [
        CountryMetadata(code="GB", name="United Kingdom"),
        CountryMetadata(code="KE", name="Kenya"),
        CountryMetadata(code="SY", name="Syria", is_high_risk=True),
    ]


@pytest.fixture
def safeguarding_records() -> list[SafeguardingRecord]:
    """One valid, two expired (one on the evaluation date), one pending."""
    return [
        SafeguardingRecord(
            id="sg-1",
            organization_id=ORG_ID,
            person_name="Alice Smith",
            expiry_date=date(2025, 1, 1),
            works_with_children=True,
            training_completed=True,
        ),
        SafeguardingRecord(
            id="sg-2",
            organization_id=ORG_ID,
            person_name="Bob Jones",
            expiry_date=date(2024, 1, 1),
            works_with_vulnerable_adults=True,
            training_completed=True,
        ),
        SafeguardingRecord(
            id="sg-3",
            organization_id=ORG_ID,
            person_name="Carol White",
            expiry_date=None,
            works_with_children=True,
            works_with_vulnerable_adults=True,
        ),
        SafeguardingRecord(
            id="sg-4",
            organization_id=ORG_ID,
            person_name="Dan Green",
            expiry_date=date(2024, 6, 30),
            training_completed=True,
        ),
    ]


@pytest.fixture
def income_records() -> list[IncomeRecord]:
    """Three records for 2024 totalling 10,000 and one for 2023."""
    return [
        IncomeRecord(
            id="inc-1",
            organization_id=ORG_ID,
            source=IncomeSource.DONATIONS_LEGACIES,
            amount=1000,
            financial_year=2024,
            donor_type=DonorType.INDIVIDUAL,
            fundraising_method=FundraisingMethod.INDIVIDUAL_GIVING,
        ),
        IncomeRecord(
            id="inc-2",
            organization_id=ORG_ID,
            source=IncomeSource.DONATIONS_LEGACIES,
            amount=2000,
            financial_year=2024,
            donor_type=DonorType.INDIVIDUAL,
            fundraising_method=FundraisingMethod.EVENTS,
            uses_professional_fundraiser=True,
        ),
        IncomeRecord(
            id="inc-3",
            organization_id=ORG_ID,
            source=IncomeSource.INVESTMENTS,
            amount=7000,
            financial_year=2024,
        ),
        IncomeRecord(
            id="inc-old",
            organization_id=ORG_ID,
            source=IncomeSource.DONATIONS_LEGACIES,
            amount=50000,
            financial_year=2023,
            donor_type=DonorType.CORPORATE,
        ),
    ]


@pytest.fixture
def overseas_activities() -> list[OverseasActivity]:
    """10,000 in 2024: Kenya 7,000 over two activities, Syria 3,000."""
    return [
        OverseasActivity(
            id="ov-1",
            organization_id=ORG_ID,
            activity_name="School meals",
            country_code="KE",
            amount=5000,
            amount_base=5000,
            transfer_method=TransferMethod.BANK_TRANSFER,
            financial_year=2024,
        ),
        OverseasActivity(
            id="ov-2",
            organization_id=ORG_ID,
            activity_name="Emergency shelter",
            country_code="SY",
            amount=3500,
            currency="USD",
            amount_base=3000,
            transfer_method=TransferMethod.CASH_COURIER,
            financial_year=2024,
        ),
        OverseasActivity(
            id="ov-3",
            organization_id=ORG_ID,
            activity_name="Clinic supplies",
            country_code="KE",
            amount=2000,
            amount_base=2000,
            transfer_method=TransferMethod.MOBILE_MONEY,
            financial_year=2024,
        ),
    ]


@pytest.fixture
def overseas_partners() -> list[OverseasPartner]:
    """Two active partners (one verified) and an inactive verified one."""
    return [
        OverseasPartner(id="p-1", organization_id=ORG_ID, name="Nairobi Aid", registration_verified=True),
        OverseasPartner(id="p-2", organization_id=ORG_ID, name="Relief Partners"),
        OverseasPartner(
            id="p-3",
            organization_id=ORG_ID,
            name="Former Partner",
            is_active=False,
            registration_verified=True,
        ),
    ]


# =============================================================================
# Repositories and engine
# =============================================================================


@pytest.fixture
def empty_repository(organization, countries) -> InMemoryRecordRepository:
    """Known organization with no records."""
    repo = InMemoryRecordRepository(countries=countries)
    repo.add_organization(organization)
    return repo


@pytest.fixture
def repository(
    empty_repository,
    safeguarding_records,
    income_records,
    overseas_activities,
    overseas_partners,
) -> InMemoryRecordRepository:
    """Sample organization with all record types."""
    empty_repository.add_safeguarding_records(safeguarding_records)
    empty_repository.add_income_records(income_records)
    empty_repository.add_overseas_activities(overseas_activities)
    empty_repository.add_overseas_partners(overseas_partners)
    return empty_repository


@pytest.fixture
def engine(repository) -> ComplianceEngine:
    return ComplianceEngine(repository)


@pytest_asyncio.fixture
async def compliance_engine_client(engine) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Compliance Engine Service."""
    from services.compliance_engine.dependencies import get_engine
    from services.compliance_engine.main import app

    app.dependency_overrides[get_engine] = lambda: engine
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()

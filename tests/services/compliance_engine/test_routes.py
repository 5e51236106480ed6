"""
Compliance Engine Routes Tests
==============================

Tests for the score, annual-return, fields and export endpoints.

Version: 0.1.0
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status

from services.compliance_engine.services.exporters import CSV_HEADER


BASE = "/api/v1/organizations"


class TestHealth:
    """Service metadata endpoints."""

    @pytest.mark.asyncio
    async def test_root(self, compliance_engine_client):
        response = await compliance_engine_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["service"] == "Charity Compliance Engine"

    @pytest.mark.asyncio
    async def test_health_degraded_without_database(self, compliance_engine_client):
        unhealthy = AsyncMock(return_value={"status": "unhealthy", "error": "refused"})
        with patch("services.compliance_engine.main.PostgresClient.health_check", unhealthy):
            response = await compliance_engine_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "degraded"
        assert response.json()["service"] == "compliance-engine"


class TestComplianceScoreRoute:
    """GET /{organization_id}/compliance-score"""

    @pytest.mark.asyncio
    async def test_score(self, compliance_engine_client):
        response = await compliance_engine_client.get(
            f"{BASE}/org-1/compliance-score",
            params={"financial_year": 2024},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["organization_id"] == "org-1"
        assert data["overall_grade"] in {"A", "B", "C", "D", "F"}
        assert [c["id"] for c in data["categories"]] == [
            "governance", "financial", "regulatory", "safeguarding", "fundraising", "data",
        ]
        assert len(data["recommendations"]) <= 5

    @pytest.mark.asyncio
    async def test_unknown_organization(self, compliance_engine_client):
        response = await compliance_engine_client.get(f"{BASE}/org-404/compliance-score")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["success"] is False
        assert response.json()["error_code"] == "NotFoundError"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_generic(self, compliance_engine_client, repository):
        repository.fail_read("income_records")

        response = await compliance_engine_client.get(
            f"{BASE}/org-1/compliance-score",
            params={"financial_year": 2024},
        )

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json()["error"] == "Failed to generate data"
        assert "income_records" not in response.text


class TestAnnualReturnRoutes:
    """Snapshot and fields endpoints."""

    @pytest.mark.asyncio
    async def test_snapshot(self, compliance_engine_client):
        response = await compliance_engine_client.get(f"{BASE}/org-1/annual-return/2024")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["charity_name"] == "Hope Trust"
        assert data["fundraising"]["total_income"] == 10000
        assert data["completeness"] == 100

    @pytest.mark.asyncio
    async def test_invalid_year(self, compliance_engine_client):
        response = await compliance_engine_client.get(f"{BASE}/org-1/annual-return/0")

        assert response.status_code == 422
        assert response.json()["error_code"] == "InvalidRequestError"

    @pytest.mark.asyncio
    async def test_fields_for_section(self, compliance_engine_client):
        response = await compliance_engine_client.get(
            f"{BASE}/org-1/annual-return/2024/fields",
            params={"section": "overseas"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["section"] == "overseas"
        assert [f["field_id"] for f in data["fields"]] == ["c1", "c2", "c3", "c4", "c5", "c6", "c7"]
        assert data["section_counts"] == {"overseas": 7}

    @pytest.mark.asyncio
    async def test_all_fields(self, compliance_engine_client):
        response = await compliance_engine_client.get(f"{BASE}/org-1/annual-return/2024/fields")

        counts = response.json()["section_counts"]
        assert list(counts) == ["organisation", "safeguarding", "overseas", "fundraising"]

    @pytest.mark.asyncio
    async def test_unknown_section(self, compliance_engine_client, repository):
        response = await compliance_engine_client.get(
            f"{BASE}/org-1/annual-return/2024/fields",
            params={"section": "trustees"},
        )

        assert response.status_code == 422
        assert "valid_sections" in response.json()["details"]
        assert repository.read_log == []


class TestExportRoute:
    """GET /{organization_id}/annual-return/{year}/export"""

    @pytest.mark.asyncio
    async def test_csv(self, compliance_engine_client):
        response = await compliance_engine_client.get(f"{BASE}/org-1/annual-return/2024/export")

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="annual-return-2024-all.csv"' in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert lines[0] == ",".join(CSV_HEADER)
        assert lines[1] == "a1,Charity name,organisation,Hope Trust,Yes"

    @pytest.mark.asyncio
    async def test_text_for_section(self, compliance_engine_client):
        response = await compliance_engine_client.get(
            f"{BASE}/org-1/annual-return/2024/export",
            params={"encoding": "text", "section": "organisation"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.text == "A1: Hope Trust\nA2: 1234567\nA3: 2025-03-31"

    @pytest.mark.asyncio
    async def test_json(self, compliance_engine_client):
        response = await compliance_engine_client.get(
            f"{BASE}/org-1/annual-return/2024/export",
            params={"encoding": "json"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["snapshot"]["organization_id"] == "org-1"
        assert data["fields"][0]["field_id"] == "a1"

    @pytest.mark.asyncio
    async def test_unknown_encoding(self, compliance_engine_client):
        response = await compliance_engine_client.get(
            f"{BASE}/org-1/annual-return/2024/export",
            params={"encoding": "xlsx"},
        )

        assert response.status_code == 422
        assert response.json()["details"]["encoding"] == "xlsx"

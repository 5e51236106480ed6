"""
Compliance Score Routes
=======================

API endpoint for an organization's weighted compliance score.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Query

from services.compliance_engine.dependencies import get_engine
from services.compliance_engine.services.engine import ComplianceEngine
from shared.logging import get_logger
from shared.models.compliance import ComplianceScoreResult


logger = get_logger(__name__)

router = APIRouter()


@router.get("/{organization_id}/compliance-score", response_model=ComplianceScoreResult)
async def get_compliance_score(
    organization_id: str,
    financial_year: int | None = Query(default=None, description="Defaults to the current year"),
    engine: ComplianceEngine = Depends(get_engine),
) -> ComplianceScoreResult:
    """
    Get the compliance score for an organization.

    Returns per-category scores, the overall score and grade, and up to
    five prioritized recommendations. Recomputed on every request.
    """
    return await engine.compute_compliance_score(
        organization_id,
        financial_year=financial_year,
    )

"""
Annual Return Routes
====================

API endpoints for the annual-return snapshot, its form fields and
downloadable exports.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field

from services.compliance_engine.dependencies import get_engine
from services.compliance_engine.services.engine import ComplianceEngine
from services.compliance_engine.services.exporters import (
    ExportEncoding,
    encode_snapshot,
    resolve_encoding,
)
from services.compliance_engine.services.field_mapper import ALL_SECTIONS, resolve_section
from shared.logging import get_logger
from shared.models.annual_return import AnnualReturnSnapshot, FieldMapping


logger = get_logger(__name__)

router = APIRouter()


class AnnualReturnFields(BaseModel):
    """Form fields for one section, or all of them."""

    organization_id: str
    financial_year: int
    section: str
    fields: list[FieldMapping]
    section_counts: dict[str, int] = Field(default_factory=dict)


@router.get("/{organization_id}/annual-return/{financial_year}", response_model=AnnualReturnSnapshot)
async def get_annual_return(
    organization_id: str,
    financial_year: int,
    engine: ComplianceEngine = Depends(get_engine),
) -> AnnualReturnSnapshot:
    """
    Get the annual-return snapshot for a financial year.

    Includes the three domain summaries, completeness and missing data.
    """
    return await engine.build_annual_return_snapshot(organization_id, financial_year)


@router.get(
    "/{organization_id}/annual-return/{financial_year}/fields",
    response_model=AnnualReturnFields,
)
async def get_annual_return_fields(
    organization_id: str,
    financial_year: int,
    section: str = Query(default=ALL_SECTIONS),
    engine: ComplianceEngine = Depends(get_engine),
) -> AnnualReturnFields:
    """
    Get annual-return form fields, optionally for a single section.

    Section ids: organisation, safeguarding, overseas, fundraising, all.
    """
    resolve_section(section)

    snapshot = await engine.build_annual_return_snapshot(organization_id, financial_year)
    fields = engine.filter_fields_by_section(engine.map_snapshot_to_fields(snapshot), section)
    groups = engine.group_fields_by_section(fields)

    return AnnualReturnFields(
        organization_id=organization_id,
        financial_year=financial_year,
        section=section,
        fields=fields,
        section_counts={s.value: len(group) for s, group in groups.items()},
    )


@router.get("/{organization_id}/annual-return/{financial_year}/export")
async def export_annual_return(
    organization_id: str,
    financial_year: int,
    encoding: str = Query(default=ExportEncoding.CSV.value),
    section: str = Query(default=ALL_SECTIONS),
    engine: ComplianceEngine = Depends(get_engine),
) -> Response:
    """
    Download annual-return fields.

    csv and text encode the (filtered) fields; json is the full snapshot
    dump together with the (filtered) fields.
    """
    resolved = resolve_encoding(encoding)
    resolve_section(section)

    snapshot = await engine.build_annual_return_snapshot(organization_id, financial_year)
    fields = engine.filter_fields_by_section(engine.map_snapshot_to_fields(snapshot), section)

    if resolved is ExportEncoding.JSON:
        content = encode_snapshot(snapshot, fields)
    else:
        content = engine.encode_fields(fields, resolved)

    filename = f"annual-return-{financial_year}-{section}.{resolved.file_extension}"
    logger.info(
        "annual_return_exported",
        organization_id=organization_id,
        financial_year=financial_year,
        encoding=resolved.value,
        section=section,
        field_count=len(fields),
    )
    return Response(
        content=content,
        media_type=resolved.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

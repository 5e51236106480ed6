"""
Compliance Engine Services
==========================

Business logic for compliance scoring and annual-return reporting.

Services:
- Aggregator: per-domain record summaries
- ScoringEngine: weighted category scores and grade
- ComplianceEngine: façade over the whole pipeline

Version: 0.1.0
"""

from services.compliance_engine.services.aggregator import AggregateResult, Aggregator
from services.compliance_engine.services.engine import ComplianceEngine
from services.compliance_engine.services.exporters import ExportEncoding
from services.compliance_engine.services.field_mapper import FieldMapper
from services.compliance_engine.services.providers import (
    CategoryDataProvider,
    LiveProvider,
    StaticPlaceholderProvider,
)
from services.compliance_engine.services.scoring import (
    CategoryDefinition,
    ScoreOutcome,
    ScoringEngine,
)


__all__ = [
    # Aggregation
    "Aggregator",
    "AggregateResult",
    # Scoring
    "ScoringEngine",
    "ScoreOutcome",
    "CategoryDefinition",
    "CategoryDataProvider",
    "LiveProvider",
    "StaticPlaceholderProvider",
    # Reporting
    "FieldMapper",
    "ExportEncoding",
    # Facade
    "ComplianceEngine",
]

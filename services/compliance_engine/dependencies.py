"""
Compliance Engine Dependencies
==============================

FastAPI dependencies for route handlers.
"""

from functools import lru_cache

from services.compliance_engine.repository import PostgresRecordRepository
from services.compliance_engine.services.engine import ComplianceEngine


@lru_cache
def get_engine() -> ComplianceEngine:
    """Engine backed by the PostgreSQL record store."""
    return ComplianceEngine(PostgresRecordRepository())

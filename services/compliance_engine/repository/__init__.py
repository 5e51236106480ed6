"""
Record Repositories
===================

Read access to safeguarding, income, overseas and reference records.
"""

from services.compliance_engine.repository.base import RecordRepository
from services.compliance_engine.repository.memory import InMemoryRecordRepository
from services.compliance_engine.repository.postgres import PostgresRecordRepository


__all__ = [
    "RecordRepository",
    "InMemoryRecordRepository",
    "PostgresRecordRepository",
]

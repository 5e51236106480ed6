"""
Database Module
===============

Async PostgreSQL access for the compliance record store.

Usage:
    from shared.database import PostgresClient

    async with PostgresClient.get_session_factory()() as session:
        result = await session.execute(text("SELECT 1"))
"""

from shared.database.postgres import PostgresClient


__all__ = [
    "PostgresClient",
]

"""
Charity Compliance Shared Library
=================================

Common utilities, configurations, and models shared by the compliance services.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - database: Async PostgreSQL session management
    - models: Shared Pydantic models (records, scores, annual return)

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Charity Compliance Team"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]

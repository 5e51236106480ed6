"""
Charity Compliance Services
===========================

Services:
- compliance_engine: compliance scoring and annual-return reporting
"""

__all__ = [
    "compliance_engine",
]

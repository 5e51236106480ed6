"""
Compliance Engine Routes
========================

API route handlers for the Compliance Engine Service.
"""

from services.compliance_engine.routes import annual_return, scores


__all__ = ["annual_return", "scores"]

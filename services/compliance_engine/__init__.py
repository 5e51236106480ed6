"""
Compliance Engine Service
=========================

Compliance aggregation and annual-return reporting for charities.

Features:
- Per-domain aggregation (safeguarding, overseas, income/fundraising)
- Weighted compliance score, grade and prioritized recommendations
- Structural missing-data detection and completeness
- Annual-return field projection with CSV, text and JSON export

Port: 8010
"""

__version__ = "0.1.0"

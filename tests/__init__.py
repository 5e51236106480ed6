"""
Charity Compliance Test Suite
=============================

Test organization:
- tests/unit/                          - Classification predicates and models
- tests/services/compliance_engine/    - Aggregation, scoring, reporting, routes

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
"""

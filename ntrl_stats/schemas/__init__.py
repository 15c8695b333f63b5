"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (UI input, API responses)
    - Domain dataclasses from core/ are converted here, never serialized directly
"""

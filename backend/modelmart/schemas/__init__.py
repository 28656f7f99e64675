"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary before anything reaches services/
    - Wire format is camelCase; attributes are snake_case

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""

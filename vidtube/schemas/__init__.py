"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Response fields serialize as camelCase; password hashes and refresh tokens
      have no response field at all

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""

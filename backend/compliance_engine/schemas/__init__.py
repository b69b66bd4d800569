"""Pydantic Schemas — validation for payloads crossing the IO boundary.

Invariants:
    - Schemas validate at system boundary (snapshot file, Congress.gov, OpenFEC)
    - Core never imports schemas; adapters convert to core value objects

Design Decisions:
    - Separate from models: schemas are external contracts, models are persistence (ADR: DDD boundary)
"""

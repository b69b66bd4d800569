"""Database Infrastructure — SQLAlchemy Base for the read models.

Invariants:
    - All sessions are async (AsyncSession)
    - Schema is owned by the persistence layer; these tables are only queried here

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""

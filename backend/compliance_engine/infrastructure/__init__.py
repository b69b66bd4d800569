"""Infrastructure Layer — IO adapters behind the core Protocols, plus logging setup.

Invariants:
    - Adapters depend on core value objects and errors, never on services/
    - Every external call maps its failures onto the core error hierarchy

Design Decisions:
    - One adapter per external system (snapshot file, Congress.gov, OpenFEC, database)
"""

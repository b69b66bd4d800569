"""ORM Models — SQLAlchemy read models for the records the notifier queries.

Invariants:
    - All models inherit from Base (db/base.py)
    - Celebration references both its donor and its politician

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from compliance_engine.models.donor import Donor  # noqa: F401
from compliance_engine.models.politician import Politician  # noqa: F401
from compliance_engine.models.celebration import Celebration  # noqa: F401

"""Database layer for estax."""

from estax.db.estimates import EstimateRepository, new_estimate_id
from estax.db.memory import InMemoryReferenceRepository
from estax.db.repository import ReferenceDataRepository, SQLiteReferenceRepository
from estax.db.schema import create_schema, seed_reference_data

__all__ = [
    "EstimateRepository",
    "InMemoryReferenceRepository",
    "ReferenceDataRepository",
    "SQLiteReferenceRepository",
    "create_schema",
    "new_estimate_id",
    "seed_reference_data",
]

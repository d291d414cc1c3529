"""
Record Store Package

The keyed document store behind the resolver:
- StandardRecordStore: async interface
- InMemoryStandardStore: dictionary-backed store
- SQLStandardStore: SQLAlchemy-backed store
"""

from standards_hub.store.base import (
    DistrictAdditionKey,
    SchoolOverrideKey,
    StandardRecordStore,
)
from standards_hub.store.memory import InMemoryStandardStore
from standards_hub.store.sql import SQLStandardStore

__all__ = [
    "DistrictAdditionKey",
    "SchoolOverrideKey",
    "StandardRecordStore",
    "InMemoryStandardStore",
    "SQLStandardStore",
]

"""Users, departments, customers and work records."""

from welfaretrack.records.definitions import (
    DEFAULTS,
    ENTITY_TYPES,
    ENUM_VALUES,
    apply_defaults,
    build_entity_rules,
)
from welfaretrack.records.service import RecordService
from welfaretrack.records.store import RecordStore, StoreQueryService

__all__ = [
    "DEFAULTS",
    "ENTITY_TYPES",
    "ENUM_VALUES",
    "apply_defaults",
    "build_entity_rules",
    "RecordService",
    "RecordStore",
    "StoreQueryService",
]

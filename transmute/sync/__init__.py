__all__ = [
    "BackfillReport",
    "ConfigProvider",
    "Gradebook",
    "GradebookReader",
    "InvalidConfiguration",
    "PersistenceFailure",
    "ShadowSyncError",
    "ShadowSyncPolicy",
    "SyncOutcome",
    "SyncStatus",
    "backfill",
    "on_item_created",
    "on_score_changed",
]

from .backfill import backfill, BackfillReport
from .errors import InvalidConfiguration, PersistenceFailure, ShadowSyncError
from .gradebook import ConfigProvider, Gradebook, GradebookReader
from .handler import on_item_created, on_score_changed
from .policy import ShadowSyncPolicy, SyncOutcome, SyncStatus

"""Entry points invoked by the host gradebook's event delivery.

These never raise: a failed synchronization is logged and reported as a
``SyncStatus.Failed`` outcome so unrelated event processing carries on.
"""

from __future__ import annotations

import logging

from transmute.model import ItemCreatedEvent, ScoreChangedEvent

from .errors import PersistenceFailure, ShadowSyncError
from .policy import ShadowSyncPolicy, SyncOutcome, SyncStatus

logger = logging.getLogger(__name__)


def on_score_changed(event: ScoreChangedEvent, policy: ShadowSyncPolicy) -> SyncOutcome:
    extra = {"item_id": event.item_id, "user_id": event.user_id}
    try:
        return policy.sync(event)
    except ShadowSyncError as e:
        logger.exception(
            f"shadow sync failed for item {event.item_id}",
            extra={**extra, "retryable": isinstance(e, PersistenceFailure)},
        )
        return SyncOutcome(status=SyncStatus.Failed, item_id=event.item_id, user_id=event.user_id, reason=str(e))
    except Exception as e:
        logger.exception(f"unexpected error in shadow sync for item {event.item_id}", extra={**extra, "retryable": False})
        return SyncOutcome(
            status=SyncStatus.Failed, item_id=event.item_id, user_id=event.user_id, reason=f"{type(e).__name__}: {e}"
        )


def on_item_created(event: ItemCreatedEvent, policy: ShadowSyncPolicy) -> SyncOutcome:
    try:
        return policy.ensure(event)
    except ShadowSyncError as e:
        logger.exception(
            f"shadow creation failed for item {event.item_id}",
            extra={"item_id": event.item_id, "retryable": isinstance(e, PersistenceFailure)},
        )
        return SyncOutcome(status=SyncStatus.Failed, item_id=event.item_id, reason=str(e))
    except Exception as e:
        logger.exception(
            f"unexpected error in shadow creation for item {event.item_id}",
            extra={"item_id": event.item_id, "retryable": False},
        )
        return SyncOutcome(status=SyncStatus.Failed, item_id=event.item_id, reason=f"{type(e).__name__}: {e}")

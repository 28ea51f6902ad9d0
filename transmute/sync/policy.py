from __future__ import annotations

import enum
import logging

from transmute.curve import DEFAULT_MIN_FLOOR, MAX_GRADE, transmute
from transmute.lib.sentinel import Invalid
from transmute.lib.util import clamp
from transmute.model import BaseModel, GradeItem, GradeItemID, ItemCreatedEvent, ScoreChangedEvent, ShadowItem, \
    UserID
from transmute.model.grade import SHADOW_MAX_SCORE, SHADOW_MIN_SCORE, SHADOW_PASS_SCORE

from .errors import InvalidConfiguration, PersistenceFailure, ShadowSyncError
from .gradebook import ConfigProvider, Gradebook

logger = logging.getLogger(__name__)


class SyncStatus(enum.Enum):
    Written = "written"
    Ensured = "ensured"
    SkippedRecursion = "skipped_recursion"
    SkippedIneligible = "skipped_ineligible"
    SkippedNoScore = "skipped_no_score"
    SkippedInvalidResult = "skipped_invalid_result"
    Failed = "failed"

    @property
    def skipped(self) -> bool:
        return self.value.startswith("skipped_")


class SyncOutcome(BaseModel):
    status: SyncStatus
    item_id: GradeItemID
    user_id: UserID | None = None

    shadow: ShadowItem | None = None
    value: float | None = None
    reason: str | None = None


class ShadowSyncPolicy(object):
    """Mirror transmuted scores of original grade items into shadow items.

    Each call runs through recursion and eligibility checks, ensures the
    shadow item exists, then computes and stores the transmuted score. The
    gradebook writes happen inside one ``Gradebook.atomic()`` unit; a failure
    there rolls the unit back and surfaces as ``PersistenceFailure``.
    """

    def __init__(self, gradebook: Gradebook, config: ConfigProvider):
        self.gradebook = gradebook
        self.config = config

    def min_floor(self) -> int:
        try:
            value = self.config.get_config("min_floor")
        except Exception as e:
            raise InvalidConfiguration(f"could not read min_floor: {e}") from e
        if value is None:
            return DEFAULT_MIN_FLOOR
        try:
            floor = int(value)
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration(f"min_floor is not an integer: {value!r}") from e
        if not 0 <= floor <= MAX_GRADE:
            raise InvalidConfiguration(f"min_floor must be between 0 and {MAX_GRADE}, got {floor}")
        return floor

    def sync(self, event: ScoreChangedEvent) -> SyncOutcome:
        item = event.item
        skipped = self._screen(item, event.user_id)
        if skipped is not None:
            return skipped

        try:
            # read once so every write in this unit uses the same floor
            min_floor = self.min_floor()

            with self.gradebook.atomic():
                shadow = self._ensure_shadow(item)

                if event.final_score is None:
                    return self._skip(SyncStatus.SkippedNoScore, item, event.user_id, "no final score", shadow=shadow)

                percent = event.final_score / item.max_score * 100
                result = transmute(percent, MAX_GRADE, min_floor)
                if isinstance(result, Invalid):
                    return self._skip(
                        SyncStatus.SkippedInvalidResult,
                        item,
                        event.user_id,
                        f"no transmutation result for {percent:.2f}%",
                        shadow=shadow,
                    )

                value = clamp(result, 0, MAX_GRADE)
                self.gradebook.upsert_shadow_grade(shadow.item_id, event.user_id, value, value)
        except ShadowSyncError:
            raise
        except Exception as e:
            raise PersistenceFailure(
                f"could not write transmuted grade for item {item.item_id}", item_id=item.item_id, user_id=event.user_id
            ) from e

        logger.info(
            "wrote transmuted grade",
            extra={
                "item_id": item.item_id,
                "shadow_item_id": shadow.item_id,
                "user_id": event.user_id,
                "percent": percent,
                "value": value,
                "min_floor": min_floor,
            },
        )
        return SyncOutcome(
            status=SyncStatus.Written, item_id=item.item_id, user_id=event.user_id, shadow=shadow, value=value
        )

    def ensure(self, event: ItemCreatedEvent) -> SyncOutcome:
        """Create the shadow item for a newly created original item, without grades."""
        item = event.item
        skipped = self._screen(item, None)
        if skipped is not None:
            return skipped

        try:
            with self.gradebook.atomic():
                shadow = self._ensure_shadow(item)
        except ShadowSyncError:
            raise
        except Exception as e:
            raise PersistenceFailure(f"could not ensure shadow for item {item.item_id}", item_id=item.item_id) from e

        return SyncOutcome(status=SyncStatus.Ensured, item_id=item.item_id, shadow=shadow)

    def _screen(self, item: GradeItem, user_id: UserID | None) -> SyncOutcome | None:
        if item.is_shadow:
            return self._skip(SyncStatus.SkippedRecursion, item, user_id, "item is already a transmuted grade item")
        if not item.is_eligible:
            return self._skip(SyncStatus.SkippedIneligible, item, user_id, "non-numeric item or invalid max score")
        return None

    def _ensure_shadow(self, item: GradeItem) -> ShadowItem:
        shadow = self.gradebook.find_shadow_item(item.course_id, item.item_id)
        if shadow is not None:
            return shadow

        logger.info(
            "creating shadow grade item",
            extra={
                "item_id": item.item_id,
                "course_id": item.course_id,
                "item_name": item.name,
            },
        )
        return self.gradebook.create_shadow_item(
            item.course_id,
            item.item_id,
            item.shadow_name,
            max_score=SHADOW_MAX_SCORE,
            min_score=SHADOW_MIN_SCORE,
            pass_score=SHADOW_PASS_SCORE,
            hidden=item.hidden,
        )

    def _skip(
        self,
        status: SyncStatus,
        item: GradeItem,
        user_id: UserID | None,
        reason: str,
        shadow: ShadowItem | None = None,
    ) -> SyncOutcome:
        logger.debug(
            "skipping shadow sync",
            extra={
                "status": status.value,
                "item_id": item.item_id,
                "user_id": user_id,
                "reason": reason,
            },
        )
        return SyncOutcome(status=status, item_id=item.item_id, user_id=user_id, shadow=shadow, reason=reason)

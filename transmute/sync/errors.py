"""Exceptions for shadow synchronization."""

from transmute.model import GradeItemID, UserID


class ShadowSyncError(Exception):
    """Error during a shadow synchronization."""

    pass


class InvalidConfiguration(ShadowSyncError):
    """Configured transmutation parameters are out of range."""

    pass


class PersistenceFailure(ShadowSyncError):
    """The gradebook failed to store a shadow item or grade; nothing was written."""

    def __init__(self, message: str, *, item_id: GradeItemID, user_id: UserID | None = None):
        super().__init__(message)
        self.item_id = item_id
        self.user_id = user_id

__all__ = [
    # Base
    "BaseModel",
    # Enums
    "DeploymentEnvironment",
    "GradeType",
    # ID Types
    "CourseID",
    "GradeItemID",
    "UserID",
    # Gradebook
    "Grade",
    "GradeItem",
    "ShadowItem",
    "SHADOW_SOURCE",
    "SHADOW_SUFFIX",
    # Events
    "ItemCreatedEvent",
    "ScoreChangedEvent",
]

from .base import BaseModel
from .enum import DeploymentEnvironment, GradeType
from .grade import Grade, GradeItem, ItemCreatedEvent, ScoreChangedEvent, SHADOW_SOURCE, SHADOW_SUFFIX, ShadowItem
from .id import CourseID, GradeItemID, UserID

__all__ = [
    "BootConfiguration",
    "StorageContainer",
    "TransmuteContainer",
]

from .storage import StorageContainer
from .transmute import BootConfiguration, TransmuteContainer

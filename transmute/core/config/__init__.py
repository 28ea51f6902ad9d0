__all__ = [
    "LoggingSettings",
    "Secrets",
    "Settings",
    "StorageSettings",
    "TransmutationSettings",
]


from .logging import LoggingSettings
from .secrets import Secrets
from .settings import Settings
from .storage import StorageSettings
from .transmutation import TransmutationSettings

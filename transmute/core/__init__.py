__all__ = [
    "BootConfiguration",
    "ConfigProvider",
    "di",
    "TransmuteContainer",
    "LoggingProvider",
    "Settings",
    "Secrets",
]


from . import di
from .config import Secrets, Settings
from .container import BootConfiguration, TransmuteContainer
from .provider import ConfigProvider, LoggingProvider

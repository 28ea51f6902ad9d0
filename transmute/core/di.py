from __future__ import annotations

__all__ = [
    "Container",
    "NotReady",
    "Provider",
    "Provide",
    "inject",
    "providers",
    "containers",
]

import dependency_injector.containers as containers
import dependency_injector.providers as providers
from dependency_injector.containers import Container
from dependency_injector.providers import Provider
from dependency_injector.wiring import inject, Provide

from transmute.lib.sentinel import NotReady

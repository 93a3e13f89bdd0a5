"""Host manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from branch_protection_probe.hosts.base import ProtectionHost


@dataclass(frozen=True, kw_only=True)
class HostManifest[ConfigT: BaseModel]:
    """Manifest describing a protection host plugin.

    Holds the configuration class and the factory opening the host, so hosts
    are only imported when selected by key.
    """

    config_cls: type[ConfigT]
    host_factory: Callable[[ConfigT], AbstractAsyncContextManager[ProtectionHost]]

"""Loading of protection hosts from entry points."""

from importlib.metadata import entry_points
from typing import Any

from branch_protection_probe.errors import ConfigurationError
from branch_protection_probe.hosts.manifest import HostManifest

ENTRY_POINT_GROUP = "branch_protection_probe.hosts"


class HostNotFoundError(ConfigurationError):
    """Raised when a host is not found."""


def load_host_manifest(key: str) -> HostManifest[Any]:
    """Load a host manifest by key.

    Args:
        key: The host key as registered in pyproject.toml
             (e.g., "github", "gh-cli")

    Raises:
        HostNotFoundError: If no host with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            manifest: HostManifest[Any] = entry.load()
            return manifest

    available = sorted(e.name for e in entries)
    raise HostNotFoundError(f"Host '{key}' not found. Available hosts: {available}")

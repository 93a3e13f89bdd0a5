"""GitHub CLI host module."""

from branch_protection_probe.hosts.gh_cli.config import GhCliConfig
from branch_protection_probe.hosts.gh_cli.host import GhCliHost
from branch_protection_probe.hosts.gh_cli.manifest import gh_cli_manifest

__all__ = ["GhCliConfig", "GhCliHost", "gh_cli_manifest"]

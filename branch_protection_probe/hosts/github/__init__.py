"""GitHub REST host module."""

from branch_protection_probe.hosts.github.config import GitHubConfig
from branch_protection_probe.hosts.github.host import GitHubHost
from branch_protection_probe.hosts.github.manifest import github_manifest

__all__ = ["GitHubConfig", "GitHubHost", "github_manifest"]

"""GitHub REST host manifest."""

from branch_protection_probe.hosts.github.config import GitHubConfig
from branch_protection_probe.hosts.github.host import GitHubHost
from branch_protection_probe.hosts.manifest import HostManifest

github_manifest = HostManifest(
    config_cls=GitHubConfig,
    host_factory=GitHubHost.from_config,
)

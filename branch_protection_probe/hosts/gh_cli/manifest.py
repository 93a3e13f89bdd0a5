"""GitHub CLI host manifest."""

from branch_protection_probe.hosts.gh_cli.config import GhCliConfig
from branch_protection_probe.hosts.gh_cli.host import GhCliHost
from branch_protection_probe.hosts.manifest import HostManifest

gh_cli_manifest = HostManifest(
    config_cls=GhCliConfig,
    host_factory=GhCliHost.from_config,
)

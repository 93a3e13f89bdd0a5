"""GitHub REST API protection host."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from urllib.parse import quote

import aiohttp

from branch_protection_probe.errors import ProbeExecutionError
from branch_protection_probe.hosts.base import ProtectionHost
from branch_protection_probe.hosts.github.config import GitHubConfig
from branch_protection_probe.models.result import Outcome

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class GitHubHost(ProtectionHost):
    """Reads branch protection through the GitHub REST API."""

    config: GitHubConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GitHubConfig
    ) -> AsyncGenerator["GitHubHost", None]:
        """Create host with managed session lifecycle."""
        headers = {
            "Authorization": f"Bearer {config.token.get_secret_value()}",
            "Accept": "application/vnd.github+json",
        }
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=config.timeout),
        ) as session:
            yield cls(config=config, session=session)

    async def fetch_protection(self, branch: str) -> Outcome:
        """Fetch the protection document of a branch."""
        url = (
            f"/repos/{self.config.owner}/{self.config.repo}"
            f"/branches/{quote(branch, safe='')}/protection"
        )
        log.info(
            "Querying protection: api_base_url=%s, url=%s",
            self.config.api_base_url,
            url,
        )

        try:
            async with self.session.get(url) as response:
                text = await response.text()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise ProbeExecutionError(
                f"Failed to query protection for {branch}: {exc}"
            ) from exc

        return Outcome(
            text=text,
            succeeded=response.status == 200,
            exit_status=response.status,
        )

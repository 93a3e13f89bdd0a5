"""GitHub CLI protection host."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from urllib.parse import quote

from branch_protection_probe.errors import ProbeExecutionError
from branch_protection_probe.hosts.base import ProtectionHost
from branch_protection_probe.hosts.gh_cli.config import GhCliConfig
from branch_protection_probe.models.result import Outcome

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class GhCliHost(ProtectionHost):
    """Reads branch protection through ``gh api``."""

    config: GhCliConfig

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GhCliConfig
    ) -> AsyncGenerator["GhCliHost", None]:
        """Create host; the CLI holds no session to manage."""
        yield cls(config=config)

    def endpoint(self, branch: str) -> str:
        """API path of the protection document for a branch."""
        repo = self.config.repo or "{owner}/{repo}"
        return f"repos/{repo}/branches/{quote(branch, safe='')}/protection"

    async def fetch_protection(self, branch: str) -> Outcome:
        """Fetch the protection document of a branch."""
        endpoint = self.endpoint(branch)
        log.info("Querying protection: %s api %s", self.config.executable, endpoint)

        try:
            process = await asyncio.create_subprocess_exec(
                self.config.executable,
                "api",
                endpoint,
                cwd=self.config.cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            raise ProbeExecutionError(
                f"Cannot run {self.config.executable}: {exc}"
            ) from exc

        try:
            stdout, _ = await asyncio.wait_for(
                process.communicate(), timeout=self.config.timeout
            )
        except TimeoutError as exc:
            process.kill()
            await process.wait()
            raise ProbeExecutionError(
                f"{self.config.executable} api did not complete within "
                f"{self.config.timeout} seconds"
            ) from exc
        finally:
            if process.returncode is None:
                process.kill()
                await asyncio.shield(process.wait())

        return Outcome(
            text=stdout.decode(errors="replace").strip(),
            succeeded=process.returncode == 0,
            exit_status=process.returncode,
        )

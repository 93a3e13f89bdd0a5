"""Scoped acquisition of the working copy around a mutating probe."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Self

from branch_protection_probe.errors import ProbeExecutionError, TargetUnavailable
from branch_protection_probe.git import Git
from branch_protection_probe.models.config import Target

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class ResourceGuard:
    """Check out a target for one probe and restore the working copy afterwards.

    The target is checked out detached at the freshly fetched upstream commit,
    so local branches are never moved. Release runs on every exit path of the
    ``async with`` block, including cancellation.
    """

    git: Git
    target: Target
    remote: str
    probe_file: str
    origin: str | None = field(default=None, init=False)
    upstream: str | None = field(default=None, init=False)

    async def __aenter__(self) -> Self:
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.release()

    async def acquire(self) -> None:
        """Switch to the target and synchronize it with its upstream.

        Raises:
            TargetUnavailable: If the target cannot be fetched or checked out.

        """
        self.origin = await self.git.current_location()
        log.debug("Acquiring %s (returning to %s)", self.target.name, self.origin)

        try:
            fetch = await self.git.run(
                "fetch", "--quiet", self.remote, f"refs/heads/{self.target.name}"
            )
            if not fetch.succeeded:
                raise TargetUnavailable(
                    f"Cannot fetch {self.target.name} from {self.remote}: {fetch.text}"
                )
            await self.git.check("checkout", "--quiet", "--detach", "FETCH_HEAD")
            self.upstream = await self.git.check("rev-parse", "HEAD")
        except ProbeExecutionError as exc:
            await self.release()
            raise TargetUnavailable(str(exc)) from exc
        except TargetUnavailable:
            await self.release()
            raise

    async def release(self) -> None:
        """Discard local mutations and return to the original location."""
        if self.origin is None:
            return

        log.debug("Releasing %s", self.target.name)
        for args in (
            ("reset", "--quiet", "--hard"),
            ("checkout", "--quiet", self.origin),
        ):
            try:
                await self.git.check(*args)
            except ProbeExecutionError as exc:
                log.error("Cleanup step failed for %s: %s", self.target.name, exc)

        try:
            (Path(self.git.repo_path) / self.probe_file).unlink(missing_ok=True)
        except OSError as exc:
            log.error("Cannot remove %s: %s", self.probe_file, exc)
        self.origin = None

"""Run git commands in the working copy under test."""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from branch_protection_probe.errors import ProbeExecutionError, TargetUnavailable
from branch_protection_probe.models.result import Outcome

log = logging.getLogger(__name__)

# Host messages are matched as text, keep them untranslated and never block
# on a credential prompt.
GIT_ENV = {"LC_ALL": "C", "GIT_TERMINAL_PROMPT": "0"}

LS_REMOTE_NO_MATCH = 2


@dataclass(frozen=True, kw_only=True)
class Git:
    """Git command runner bound to one working copy."""

    repo_path: Path
    timeout: float | None = None

    async def run(self, *args: str) -> Outcome:
        """Run a git command and capture its combined output.

        Raises:
            ProbeExecutionError: If git cannot be spawned or the call
                exceeds the timeout.

        """
        log.debug("Running git %s", " ".join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                "git",
                *args,
                cwd=self.repo_path,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env={**os.environ, **GIT_ENV},
            )
        except OSError as exc:
            raise ProbeExecutionError(f"Cannot run git: {exc}") from exc

        try:
            stdout, _ = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout
            )
        except TimeoutError as exc:
            process.kill()
            await process.wait()
            raise ProbeExecutionError(
                f"git {args[0]} did not complete within {self.timeout} seconds"
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

    async def check(self, *args: str) -> str:
        """Run a git command that must succeed and return its output."""
        outcome = await self.run(*args)
        if not outcome.succeeded:
            raise ProbeExecutionError(
                f"git {' '.join(args)} failed ({outcome.exit_status}): {outcome.text}"
            )
        return outcome.text

    async def is_work_tree(self) -> bool:
        """Check if the repository path is inside a git work tree."""
        outcome = await self.run("rev-parse", "--is-inside-work-tree")
        return outcome.succeeded and outcome.text == "true"

    async def is_clean(self) -> bool:
        """Check if the work tree has no staged, unstaged or untracked changes."""
        return await self.check("status", "--porcelain") == ""

    async def current_location(self) -> str:
        """Return the checked out branch, or the commit SHA when detached."""
        outcome = await self.run("symbolic-ref", "--quiet", "--short", "HEAD")
        if outcome.succeeded:
            return outcome.text
        return await self.check("rev-parse", "HEAD")

    async def remote_head(self, remote: str, branch: str) -> str | None:
        """Resolve a branch on the remote to its commit SHA.

        Returns:
            The commit SHA, or None if the branch does not exist on the remote.

        Raises:
            TargetUnavailable: If the remote cannot be queried.

        """
        outcome = await self.run(
            "ls-remote", "--exit-code", "--heads", remote, f"refs/heads/{branch}"
        )
        if outcome.exit_status == LS_REMOTE_NO_MATCH:
            return None
        if not outcome.succeeded:
            raise TargetUnavailable(
                f"Cannot query {remote} for {branch}: {outcome.text}"
            )

        for line in outcome.text.splitlines():
            sha, _, ref = line.partition("\t")
            if ref == f"refs/heads/{branch}":
                return sha
        return None

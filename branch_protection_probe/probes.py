"""Probes performing one candidate-violating operation against a target."""

import logging
import uuid
from pathlib import Path

from branch_protection_probe.errors import ProbeExecutionError
from branch_protection_probe.git import Git
from branch_protection_probe.hosts.base import ProtectionHost
from branch_protection_probe.models.config import ProbeKind, Target
from branch_protection_probe.models.result import Outcome

log = logging.getLogger(__name__)

COMMIT_MESSAGES: dict[ProbeKind, str] = {
    "direct-write": "test: branch protection check",
    "forced-overwrite": "test: force push prevention",
}


async def commit_probe_file(git: Git, probe_file: str, message: str) -> None:
    """Create a commit adding a uniquely filled probe file."""
    path = Path(git.repo_path) / probe_file
    try:
        path.write_text(f"branch protection probe {uuid.uuid4()}\n")
    except OSError as exc:
        raise ProbeExecutionError(f"Cannot write {probe_file}: {exc}") from exc
    await git.check("add", "--force", "--", probe_file)
    await git.check("commit", "--quiet", "--no-verify", "--message", message)


async def direct_write(
    git: Git, target: Target, remote: str, probe_file: str
) -> Outcome:
    """Commit a trivial change and push it straight onto the target."""
    await commit_probe_file(git, probe_file, COMMIT_MESSAGES["direct-write"])
    return await git.run(
        "push", "--no-verify", remote, f"HEAD:refs/heads/{target.name}"
    )


async def forced_overwrite(
    git: Git, target: Target, remote: str, probe_file: str
) -> Outcome:
    """Rewind the target by one commit, commit on top and force-push.

    The pushed history no longer contains the upstream tip, so the push is
    a non-fast-forward update.
    """
    rewind = await git.run("reset", "--quiet", "--hard", "HEAD~1")
    if not rewind.succeeded:
        raise ProbeExecutionError(
            f"Cannot rewrite history of {target.name}: {rewind.text}"
        )
    await commit_probe_file(git, probe_file, COMMIT_MESSAGES["forced-overwrite"])
    return await git.run(
        "push", "--no-verify", "--force", remote, f"HEAD:refs/heads/{target.name}"
    )


async def deletion(git: Git, target: Target, remote: str, probe_file: str) -> Outcome:
    """Attempt to delete the target's upstream branch."""
    return await git.run(
        "push", "--no-verify", remote, "--delete", f"refs/heads/{target.name}"
    )


async def configuration_query(host: ProtectionHost | None, target: Target) -> Outcome:
    """Read the host's declared protection configuration for the target."""
    if host is None:
        raise ProbeExecutionError("No protection host configured")
    return await host.fetch_protection(target.name)


MUTATING_PROBES = {
    "direct-write": direct_write,
    "forced-overwrite": forced_overwrite,
    "deletion": deletion,
}


async def run_probe(
    kind: ProbeKind, *, git: Git, target: Target, remote: str, probe_file: str
) -> Outcome:
    """Run a mutating probe inside an acquired working copy."""
    try:
        probe = MUTATING_PROBES[kind]
    except KeyError:
        raise ValueError(f"Probe kind '{kind}' does not mutate the remote") from None

    log.info("Probing %s: %s", target.display, kind)
    outcome = await probe(git, target, remote, probe_file)
    log.debug("Outcome (exit=%s): %s", outcome.exit_status, outcome.text)
    return outcome

"""Test runner sequencing probes across the configured targets."""

import logging
from dataclasses import dataclass
from pathlib import Path

from branch_protection_probe.classifier import classify
from branch_protection_probe.errors import (
    ClassificationAmbiguous,
    PreflightError,
    ProbeExecutionError,
    TargetUnavailable,
)
from branch_protection_probe.git import Git
from branch_protection_probe.guard import ResourceGuard
from branch_protection_probe.hosts.base import ProtectionHost
from branch_protection_probe.models.config import (
    MUTATING_PROBE_KINDS,
    HarnessConfig,
    ProbeKind,
    Target,
)
from branch_protection_probe.models.result import Outcome, ProbeRecord, RunReport
from branch_protection_probe.probes import configuration_query, run_probe

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestRunner:
    """Runs every (target, probe kind) pair sequentially.

    Pairs share the working copy, so they never run concurrently. A pair that
    fails or errors does not stop the run.
    """

    __test__ = False

    git: Git
    config: HarnessConfig
    host: ProtectionHost | None = None

    async def preflight(self) -> None:
        """Ensure the working copy can be mutated and restored safely.

        Raises:
            PreflightError: If the path is not a clean git work tree or the
                probe file already exists.

        """
        if not await self.git.is_work_tree():
            raise PreflightError(f"Not in a git repository: {self.git.repo_path}")
        if not await self.git.is_clean():
            raise PreflightError(
                "Working copy has uncommitted changes; commit or stash them first"
            )
        probe_path = Path(self.git.repo_path) / self.config.probe_file
        if probe_path.exists() or probe_path.is_symlink():
            raise PreflightError(
                f"{probe_path} already exists; remove it or choose another probe_file"
            )

    async def run(self) -> RunReport:
        """Run all pairs in declaration order and return the finalized report."""
        await self.preflight()

        records: list[ProbeRecord] = []
        for target in self.config.targets:
            for kind in self.config.probes:
                record = await self.run_pair(target, kind)
                log.info("%s: %s", record.pair, record.verdict)
                records.append(record)

        log.info("Probe execution completed")
        return RunReport(records=records)

    async def run_pair(self, target: Target, kind: ProbeKind) -> ProbeRecord:
        """Probe one target with one probe kind and record the verdict."""
        log.debug("%s/%s: pending", target.display, kind)
        try:
            upstream = await self.git.remote_head(self.config.remote, target.name)
        except (TargetUnavailable, ProbeExecutionError) as exc:
            return self._inconclusive(target, kind, str(exc))

        if upstream is None:
            log.warning(
                "Branch '%s' not found on %s, skipping", target.name, self.config.remote
            )
            return self._inconclusive(
                target, kind, f"Branch not found on {self.config.remote}"
            )

        try:
            outcome = await self._probe(target, kind)
            classification = classify(outcome, self.config.probes[kind])
        except (
            TargetUnavailable,
            ProbeExecutionError,
            ClassificationAmbiguous,
        ) as exc:
            return self._inconclusive(target, kind, str(exc))

        note = classification.reason
        if classification.verdict == "FAIL":
            log.error("Protection gap: %s/%s: %s", target.display, kind, note)
            if kind in MUTATING_PROBE_KINDS and self.config.restore_on_fail:
                note = f"{note}; {await self._restore_upstream(target, upstream)}"

        return ProbeRecord(
            target=target, kind=kind, verdict=classification.verdict, note=note
        )

    async def _probe(self, target: Target, kind: ProbeKind) -> Outcome:
        if kind not in MUTATING_PROBE_KINDS:
            return await configuration_query(self.host, target)

        log.debug("%s/%s: acquiring", target.display, kind)
        async with ResourceGuard(
            git=self.git,
            target=target,
            remote=self.config.remote,
            probe_file=self.config.probe_file,
        ):
            log.debug("%s/%s: probing", target.display, kind)
            outcome = await run_probe(
                kind,
                git=self.git,
                target=target,
                remote=self.config.remote,
                probe_file=self.config.probe_file,
            )
            log.debug("%s/%s: releasing", target.display, kind)
        return outcome

    async def _restore_upstream(self, target: Target, upstream: str) -> str:
        """Force the remote branch back to the commit recorded before probing."""
        log.warning("Restoring %s to %s", target.name, upstream)
        try:
            outcome = await self.git.run(
                "push",
                "--no-verify",
                "--force",
                self.config.remote,
                f"{upstream}:refs/heads/{target.name}",
            )
        except ProbeExecutionError as exc:
            log.error("Failed to restore %s: %s", target.name, exc)
            return f"restore failed: {exc}"

        if not outcome.succeeded:
            log.error("Failed to restore %s: %s", target.name, outcome.text)
            return f"restore failed: {outcome.text}"
        return f"restored to {upstream}"

    @staticmethod
    def _inconclusive(target: Target, kind: ProbeKind, note: str) -> ProbeRecord:
        log.warning("%s/%s inconclusive: %s", target.display, kind, note)
        return ProbeRecord(target=target, kind=kind, verdict="INCONCLUSIVE", note=note)

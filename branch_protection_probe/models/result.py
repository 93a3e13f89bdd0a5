"""Models for probe outcomes and run results."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from branch_protection_probe.models.config import ProbeKind, Target

type Verdict = Literal["PASS", "FAIL", "INCONCLUSIVE"]


@dataclass(frozen=True, kw_only=True)
class Outcome:
    """Raw, uninterpreted result of one external operation.

    ``exit_status`` is the process return code for CLI calls, or the HTTP
    status for API calls.
    """

    text: str
    succeeded: bool
    exit_status: int | None = None


@dataclass(frozen=True, kw_only=True)
class ProbeRecord:
    """Verdict recorded for one (target, probe kind) pair."""

    target: Target
    kind: ProbeKind
    verdict: Verdict
    note: str | None = None

    @property
    def pair(self) -> str:
        """Identifier of the pair as shown in summaries."""
        return f"{self.target.display}/{self.kind}"


@dataclass(frozen=True, kw_only=True)
class RunReport:
    """Finalized, ordered results of a harness run."""

    records: Sequence[ProbeRecord]

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))

    def _count(self, verdict: Verdict) -> int:
        return sum(1 for record in self.records if record.verdict == verdict)

    @property
    def passed(self) -> int:
        return self._count("PASS")

    @property
    def failed(self) -> int:
        return self._count("FAIL")

    @property
    def inconclusive(self) -> int:
        return self._count("INCONCLUSIVE")

    @property
    def total(self) -> int:
        return len(self.records)

"""Judge probe outcomes against expected rejection signatures."""

from collections.abc import Sequence
from dataclasses import dataclass

from branch_protection_probe.errors import ClassificationAmbiguous
from branch_protection_probe.models.config import ProbeRules
from branch_protection_probe.models.result import Outcome, Verdict


@dataclass(frozen=True, kw_only=True)
class Classification:
    """Verdict for an outcome and the reason it was reached."""

    verdict: Verdict
    reason: str


def matching_signatures(text: str, signatures: Sequence[str]) -> Sequence[str]:
    """Return the signatures contained in text, ignoring case."""
    folded = text.casefold()
    return [s for s in signatures if s.casefold() in folded]


def classify(outcome: Outcome, rules: ProbeRules) -> Classification:
    """Classify an outcome as PASS, FAIL or INCONCLUSIVE.

    A rejection signature always wins over the exit status: hosts commonly
    report a non-zero status together with unrelated errors when they block
    an operation.

    Raises:
        ClassificationAmbiguous: If the text matches both rejection and
            acceptance signatures.

    """
    rejected = matching_signatures(outcome.text, rules.signatures)
    accepted = matching_signatures(outcome.text, rules.acceptance_signatures)

    if rejected and accepted:
        raise ClassificationAmbiguous(
            f"Outcome matches rejection signatures {rejected} "
            f"and acceptance signatures {accepted}"
        )

    if rejected:
        return Classification(verdict="PASS", reason=f"Rejected: {rejected[0]!r}")

    if accepted:
        return Classification(verdict="FAIL", reason=f"Accepted: {accepted[0]!r}")

    if outcome.succeeded:
        return Classification(
            verdict="FAIL", reason="Operation succeeded without rejection"
        )

    return Classification(
        verdict="INCONCLUSIVE",
        reason=f"Operation failed for an unrelated reason (exit {outcome.exit_status})",
    )

"""Models for the harness configuration loaded from YAML files."""

from collections.abc import Mapping, Sequence
from typing import Literal, get_args

from pydantic import Field, field_validator

from branch_protection_probe.models.base import Model

type ProbeKind = Literal[
    "direct-write",
    "forced-overwrite",
    "deletion",
    "configuration-query",
]

PROBE_KINDS: Sequence[ProbeKind] = get_args(ProbeKind.__value__)

MUTATING_PROBE_KINDS: frozenset[ProbeKind] = frozenset(
    {"direct-write", "forced-overwrite", "deletion"}
)


class Target(Model):
    """A protected branch under test."""

    name: str = Field(..., min_length=1, description="Branch name on the remote")
    label: str | None = Field(default=None, description="Display label")

    @property
    def display(self) -> str:
        """Label used in reports, falling back to the branch name."""
        return self.label or self.name

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if value.startswith("-") or any(c.isspace() for c in value):
            raise ValueError(f"Invalid branch name: {value!r}")
        return value


class ProbeRules(Model):
    """Signatures used to judge the outcome of one probe kind."""

    signatures: Sequence[str] = Field(
        ...,
        min_length=1,
        description="Substrings emitted by the host when it blocks the operation",
    )
    acceptance_signatures: Sequence[str] = Field(
        default=(),
        description="Substrings emitted when the operation went through unblocked",
    )

    @field_validator("signatures", "acceptance_signatures")
    @classmethod
    def _reject_blank(cls, value: Sequence[str]) -> Sequence[str]:
        if any(not signature.strip() for signature in value):
            raise ValueError("Signatures must not be blank")
        return tuple(value)


def default_probe_rules() -> Mapping[ProbeKind, ProbeRules]:
    """Signatures matching the rejection messages of common git hosts."""
    return {
        "direct-write": ProbeRules(
            signatures=(
                "protected branch",
                "pre-receive hook declined",
                "cannot push",
            ),
        ),
        "forced-overwrite": ProbeRules(
            signatures=(
                "protected branch",
                "cannot force-update",
                "pre-receive hook declined",
                "not allowed to force push",
            ),
        ),
        "deletion": ProbeRules(
            signatures=(
                "cannot delete",
                "protected branch",
                "pre-receive hook declined",
                "not allowed to delete",
            ),
        ),
        "configuration-query": ProbeRules(
            signatures=("required_status_checks",),
            acceptance_signatures=("branch not protected",),
        ),
    }


class HarnessConfig(Model):
    """Complete harness configuration."""

    version: str = Field(default="1.0", description="Configuration schema version")
    remote: str = Field(default="origin", description="Git remote hosting targets")
    timeout: float | None = Field(
        default=120.0, gt=0, description="Seconds allowed per external call"
    )
    probe_file: str = Field(
        default=".branch-protection-probe",
        min_length=1,
        description="Temporary file committed by mutating probes",
    )
    restore_on_fail: bool = Field(
        default=True,
        description="Push the recorded upstream commit back after a protection gap",
    )
    targets: Sequence[Target] = Field(..., min_length=1, description="Targets")
    probes: Mapping[ProbeKind, ProbeRules] = Field(
        default_factory=default_probe_rules,
        min_length=1,
        description="Probe kinds to run, in order, with their rules",
    )

    @field_validator("targets")
    @classmethod
    def _unique_targets(cls, value: Sequence[Target]) -> Sequence[Target]:
        names = [target.name for target in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate targets: {', '.join(duplicates)}")
        return tuple(value)

    @field_validator("probe_file")
    @classmethod
    def _plain_file_name(cls, value: str) -> str:
        if "/" in value or value in {".", ".."}:
            raise ValueError("probe_file must be a plain file name")
        return value

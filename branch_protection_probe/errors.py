"""Exceptions raised by the branch protection harness."""


class ProbeHarnessError(Exception):
    """Base class for harness errors."""


class ConfigurationError(ProbeHarnessError, ValueError):
    """Raised when the harness configuration cannot be built."""


class PreflightError(ProbeHarnessError):
    """Raised when the working copy is not fit for destructive probes."""


class TargetUnavailable(ProbeHarnessError):
    """Raised when a target cannot be resolved or fetched."""


class ProbeExecutionError(ProbeHarnessError):
    """Raised when an external call could not be completed at all.

    Distinct from a call that ran and was rejected by the host: the
    protection rule was never exercised.
    """


class ClassificationAmbiguous(ProbeHarnessError):
    """Raised when an outcome matches conflicting signatures."""

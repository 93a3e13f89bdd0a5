"""Abstract base class for protection configuration hosts."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from branch_protection_probe.models.result import Outcome


@dataclass(frozen=True, kw_only=True)
class ProtectionHost(ABC):
    """Read-only access to a host's declared branch protection."""

    @abstractmethod
    async def fetch_protection(self, branch: str) -> Outcome:
        """Fetch the raw protection document for a branch.

        Args:
            branch: Branch name on the host

        Returns:
            Raw response text, with ``succeeded`` set when the host answered
            the query successfully

        Raises:
            ProbeExecutionError: If the host cannot be reached

        """

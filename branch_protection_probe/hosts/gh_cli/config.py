"""Configuration for the GitHub CLI host."""

from pathlib import Path

from pydantic import BaseModel


class GhCliConfig(BaseModel):
    """Configuration for the GitHub CLI host.

    Without ``repo`` the repository is inferred by ``gh`` from the working
    copy in ``cwd``.
    """

    executable: str = "gh"
    repo: str | None = None
    cwd: Path | None = None
    timeout: float = 60

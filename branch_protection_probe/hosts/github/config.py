"""Configuration for the GitHub REST host."""

from pydantic import BaseModel, SecretStr


class GitHubConfig(BaseModel):
    """Configuration for the GitHub REST host."""

    token: SecretStr
    owner: str
    repo: str
    api_base_url: str = "https://api.github.com"
    timeout: float = 60

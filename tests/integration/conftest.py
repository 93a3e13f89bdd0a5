"""Fixtures for integration tests against real git repositories."""

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from branch_protection_probe.git import Git

# Mimics a hosting service: branches listed in protected-branches reject
# deletion, non-fast-forward updates and direct pushes.
PRE_RECEIVE_HOOK = """#!/bin/sh
while read old new ref; do
  branch=${ref#refs/heads/}
  if grep -qx "$branch" protected-branches 2>/dev/null; then
    if [ -z "$(echo "$new" | tr -d 0)" ]; then
      echo "Cannot delete this protected branch" >&2
      exit 1
    fi
    if ! git merge-base --is-ancestor "$old" "$new"; then
      echo "Cannot force-update protected branch $branch" >&2
      exit 1
    fi
    echo "protected branch update failed for $ref" >&2
    exit 1
  fi
done
exit 0
"""

def git_cmd(cwd: Path, *args: str) -> str:
    """Run a git command that must succeed and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def remote_repo(tmp_path: Path) -> Path:
    """Create a bare remote enforcing protection through a pre-receive hook."""
    remote = tmp_path / "remote.git"
    remote.mkdir()
    git_cmd(remote, "init", "--bare", "--initial-branch=main")

    hook = remote / "hooks" / "pre-receive"
    hook.write_text(PRE_RECEIVE_HOOK)
    hook.chmod(0o755)
    return remote


@pytest.fixture
def protect(remote_repo: Path) -> Callable[..., None]:
    """Return a function marking branches as protected on the remote."""

    def _protect(*branches: str) -> None:
        (remote_repo / "protected-branches").write_text(
            "".join(f"{branch}\n" for branch in branches)
        )

    return _protect


@pytest.fixture
def work_repo(tmp_path: Path, remote_repo: Path) -> Path:
    """Clone the remote and publish main, staging and develop."""
    work = tmp_path / "work"
    git_cmd(tmp_path, "clone", "--quiet", str(remote_repo), str(work))
    git_cmd(work, "config", "user.email", "test@example.com")
    git_cmd(work, "config", "user.name", "Test")
    git_cmd(work, "config", "commit.gpgsign", "false")
    git_cmd(work, "symbolic-ref", "HEAD", "refs/heads/main")

    for number in (1, 2):
        (work / "README.md").write_text(f"revision {number}\n")
        git_cmd(work, "add", "README.md")
        git_cmd(work, "commit", "--quiet", "-m", f"revision {number}")

    git_cmd(work, "push", "--quiet", "origin", "main")
    for branch in ("staging", "develop"):
        git_cmd(work, "push", "--quiet", "origin", f"main:refs/heads/{branch}")
    return work


@pytest.fixture
def git(work_repo: Path) -> Git:
    """Git runner bound to the working copy."""
    return Git(repo_path=work_repo, timeout=30)


@pytest.fixture
def remote_sha(remote_repo: Path) -> Callable[[str], str | None]:
    """Return a function resolving a branch on the remote."""

    def _resolve(branch: str) -> str | None:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"refs/heads/{branch}"],
            cwd=remote_repo,
            capture_output=True,
            text=True,
        )
        return result.stdout.strip() or None

    return _resolve


@pytest.fixture
def run_git() -> Callable[..., str]:
    """Return a function running git commands that must succeed."""
    return git_cmd

"""Tests for the git runner."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest

from branch_protection_probe.git import Git


async def test_cancellation_kills_and_reaps_process(tmp_path: Path) -> None:
    """A cancelled call kills the child and waits for it to exit."""
    started = asyncio.Event()

    async def hang() -> tuple[bytes, None]:
        started.set()
        await asyncio.Event().wait()
        return b"", None

    process = Mock()
    process.returncode = None
    process.communicate = AsyncMock(side_effect=hang)
    process.wait = AsyncMock(return_value=-9)

    with patch(
        "branch_protection_probe.git.asyncio.create_subprocess_exec",
        new_callable=AsyncMock,
        return_value=process,
    ):
        task = asyncio.create_task(Git(repo_path=tmp_path).run("fetch"))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    process.kill.assert_called_once()
    process.wait.assert_awaited_once()

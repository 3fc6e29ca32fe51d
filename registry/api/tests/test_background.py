# coding: utf-8

import asyncio
import logging

import pytest

from registry_api.services.background import TaskTracker
from registry_api.services.download_accounting import DownloadAccountant


@pytest.mark.asyncio
async def test_tracker_drains_spawned_tasks():
    tracker = TaskTracker()
    finished = []

    async def _work(value: int) -> None:
        await asyncio.sleep(0)
        finished.append(value)

    for value in range(3):
        tracker.spawn(_work(value))
    assert len(tracker) == 3

    await tracker.drain()

    assert sorted(finished) == [0, 1, 2]
    assert len(tracker) == 0


@pytest.mark.asyncio
async def test_tracker_swallows_task_failures():
    tracker = TaskTracker()

    async def _boom() -> None:
        raise RuntimeError("boom")

    tracker.spawn(_boom())
    await tracker.drain()
    assert len(tracker) == 0


@pytest.mark.asyncio
async def test_accounting_failure_is_logged(caplog):
    tracker = TaskTracker()
    accountant = DownloadAccountant(tracker)

    with caplog.at_level(logging.WARNING, logger="registry_api.services.download_accounting"):
        accountant.schedule(424242, None, "127.0.0.1", "pytest")
        await tracker.drain()

    assert "Download served but not accounted" in caplog.text

"""
Tests for the ranking refresh scheduler
"""
import asyncio
import importlib
from datetime import datetime

import pytest

import scheduler as scheduler_module
from config import settings
from processor.ranker import RankingSnapshot
from scheduler import RankingRefreshScheduler
from utils.exceptions import UnavailableError


class FakeRankingService:

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = 0

    async def refresh_rankings(self):
        self.calls += 1
        if self.fail:
            raise UnavailableError("Ranking data is temporarily unavailable")
        return RankingSnapshot(computed_at=datetime.now(), generation=self.calls)


@pytest.mark.asyncio
async def test_refresh_job_success():
    service = FakeRankingService()
    scheduler = RankingRefreshScheduler(service, interval_minutes=5)

    assert await scheduler.refresh_rankings() is True
    assert service.calls == 1


@pytest.mark.asyncio
async def test_refresh_job_failure_is_reported():
    scheduler = RankingRefreshScheduler(FakeRankingService(fail=True), interval_minutes=5)

    assert await scheduler.refresh_rankings() is False


@pytest.mark.asyncio
async def test_start_registers_interval_job():
    scheduler = RankingRefreshScheduler(FakeRankingService(), interval_minutes=15)

    scheduler.start()
    try:
        jobs = scheduler.scheduler.get_jobs()
        assert [job.id for job in jobs] == ["ranking_refresh"]
        assert jobs[0].trigger.interval.total_seconds() == 15 * 60
    finally:
        scheduler.stop()

    # shutdown completes on a later loop iteration
    for _ in range(3):
        await asyncio.sleep(0)
    assert not scheduler.scheduler.running


def test_zero_interval_is_refused():
    scheduler = RankingRefreshScheduler(FakeRankingService(), interval_minutes=0)

    with pytest.raises(ValueError):
        scheduler.setup()
    assert scheduler.scheduler.get_jobs() == []


def test_daemon_exits_when_refresh_disabled(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "RANKING_REFRESH_INTERVAL_MINUTES", 0)
    monkeypatch.setattr(settings, "DATA_DIR", tmp_path)
    monkeypatch.setattr(settings, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(importlib.import_module("utils.logger"), "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr("sys.argv", ["scheduler.py"])

    def fail_if_started():
        raise AssertionError("daemon should not start")

    monkeypatch.setattr(scheduler_module, "run_scheduler", fail_if_started)

    with pytest.raises(SystemExit) as exc_info:
        scheduler_module.main()
    assert exc_info.value.code == 1

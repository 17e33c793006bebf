"""Tests for ctxrouter.stats — lazily refreshed process telemetry."""

import logging

import psutil
import pytest

from ctxrouter.stats import ProcessStats


class _FakeProcess:
    def __init__(self) -> None:
        self.cpu_calls = 0

    def cpu_percent(self, interval=None) -> float:
        self.cpu_calls += 1
        return 12.5

    def memory_info(self):
        class _Mem:
            rss = 64 * 1024 * 1024

        return _Mem()


class _GoneProcess:
    def cpu_percent(self, interval=None) -> float:
        raise psutil.NoSuchProcess(pid=1)


@pytest.fixture
def fake_process(monkeypatch: pytest.MonkeyPatch) -> _FakeProcess:
    process = _FakeProcess()
    monkeypatch.setattr(psutil, "Process", lambda: process)
    return process


class TestProcessStats:
    def test_unsampled_defaults(self) -> None:
        stats = ProcessStats()
        assert stats.cpu == -1
        assert stats.mem == -1
        assert stats.interval == 5.0

    def test_first_refresh_samples(self, fake_process: _FakeProcess) -> None:
        stats = ProcessStats(interval=5.0)
        assert stats.refresh_if_stale(now=100.0) is True
        assert stats.cpu == 12.5
        assert stats.mem == 64
        # priming call plus the real sample
        assert fake_process.cpu_calls == 2

    def test_not_resampled_within_interval(self, fake_process: _FakeProcess) -> None:
        stats = ProcessStats(interval=5.0)
        stats.refresh_if_stale(now=100.0)
        assert stats.refresh_if_stale(now=104.9) is False
        assert fake_process.cpu_calls == 2

    def test_resampled_after_interval(self, fake_process: _FakeProcess) -> None:
        stats = ProcessStats(interval=5.0)
        stats.refresh_if_stale(now=100.0)
        assert stats.refresh_if_stale(now=105.0) is True
        assert fake_process.cpu_calls == 3

    def test_psutil_errors_keep_previous_values(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setattr(psutil, "Process", _GoneProcess)
        stats = ProcessStats()
        with caplog.at_level(logging.DEBUG, logger="ctxrouter.stats"):
            assert stats.refresh_if_stale(now=1.0) is True
        assert stats.cpu == -1
        assert stats.mem == -1
        assert "Process stats unavailable" in caplog.text

    def test_real_process_sample(self) -> None:
        stats = ProcessStats()
        stats.refresh_if_stale()
        assert stats.cpu >= 0
        assert stats.mem > 0

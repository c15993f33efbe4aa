"""Tests for the periodic task."""

from unittest.mock import MagicMock

import pytest

from src.infrastructure.scheduler import PeriodicTask


def test_run_once_skips_when_run_in_progress():
    """An overlapping run should be skipped, not executed twice."""
    action = MagicMock()
    logger = MagicMock()
    task = PeriodicTask(action, interval_seconds=60, logger=logger)

    task._run_lock.acquire()
    try:
        ran = task.run_once()
    finally:
        task._run_lock.release()

    assert ran is False
    action.assert_not_called()
    logger.warning.assert_called_once()


def test_run_once_logs_failures():
    """Exceptions from the action should be logged and swallowed."""
    logger = MagicMock()
    task = PeriodicTask(
        MagicMock(side_effect=RuntimeError("boom")),
        interval_seconds=60,
        logger=logger,
    )

    assert task.run_once() is True
    logger.exception.assert_called_once()


def test_run_forever_stops_on_cancellation():
    """stop() should end the loop after the current run."""
    calls = []
    task = None

    def action():
        calls.append(1)
        task.stop()

    task = PeriodicTask(action, interval_seconds=3600, logger=MagicMock())

    task.run_forever()

    assert calls == [1]


def test_start_and_stop_background_thread():
    """The background thread should start and be joined on stop."""
    task = PeriodicTask(MagicMock(), interval_seconds=3600, logger=MagicMock())

    task.start()
    assert task.is_running
    task.stop(timeout=5)

    assert task.is_running is False


def test_interval_must_be_positive():
    """A non-positive interval should be rejected."""
    with pytest.raises(ValueError):
        PeriodicTask(MagicMock(), interval_seconds=0, logger=MagicMock())

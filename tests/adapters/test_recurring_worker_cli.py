"""Tests for the recurring worker CLI adapter."""

from unittest.mock import MagicMock

from src.adapters import recurring_worker_cli
from src.application.use_cases.materialize_recurring import (
    MaterializationResult,
)


def test_main_runs_single_pass(monkeypatch, capsys):
    """Without --loop one pass should run and print its summary."""
    use_case = MagicMock()
    use_case.run.return_value = MaterializationResult(created=[1, 2])
    monkeypatch.setattr(recurring_worker_cli, "get_app_logger", lambda: MagicMock())
    monkeypatch.setattr(
        recurring_worker_cli,
        "build_materialize_use_case",
        lambda: use_case,
    )

    recurring_worker_cli.main([])

    use_case.run.assert_called_once_with()
    assert "Materialized 2 recurring entries" in capsys.readouterr().out


def test_main_loop_stops_task_on_interrupt(monkeypatch):
    """--loop should run the periodic task and stop it on Ctrl+C."""
    task = MagicMock()
    task.run_forever.side_effect = KeyboardInterrupt
    monkeypatch.setattr(recurring_worker_cli, "get_app_logger", lambda: MagicMock())
    monkeypatch.setattr(
        recurring_worker_cli,
        "build_materialize_use_case",
        lambda: MagicMock(),
    )
    monkeypatch.setattr(
        recurring_worker_cli,
        "build_recurring_task",
        lambda use_case: task,
    )

    recurring_worker_cli.main(["--loop"])

    task.run_forever.assert_called_once()
    task.stop.assert_called_once()

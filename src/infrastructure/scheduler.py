"""Cancellable periodic task used by the recurring worker."""

from collections.abc import Callable
import threading

from src.infrastructure.logging.logger import get_app_logger


class PeriodicTask:
    """Run a callable on a fixed interval until cancelled.

    Runs never overlap: a run that is still in progress when another is
    triggered (by the timer or by ``run_once``) makes the second one a no-op.
    Exceptions raised by the callable are logged and do not stop the loop.
    """

    def __init__(
        self,
        action: Callable[[], object],
        interval_seconds: float,
        name: str = "periodic-task",
        logger=None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._action = action
        self._interval = interval_seconds
        self._name = name
        self._logger = logger or get_app_logger()
        self._stop_event = threading.Event()
        self._run_lock = threading.Lock()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> bool:
        """Run the action now unless a run is already in progress.

        Returns:
            bool: True when the action ran, False when it was skipped.
        """
        if not self._run_lock.acquire(blocking=False):
            self._logger.warning(
                f"{self._name}: previous run still in progress; skipping"
            )
            return False
        try:
            self._action()
        except Exception as exc:
            self._logger.exception(f"{self._name}: run failed: {exc}")
        finally:
            self._run_lock.release()
        return True

    def run_forever(self) -> None:
        """Run immediately, then on every interval until ``stop`` is called."""
        self._logger.info(
            f"{self._name}: started with interval {self._interval}s"
        )
        while not self._stop_event.is_set():
            self.run_once()
            if self._stop_event.wait(self._interval):
                break
        self._logger.info(f"{self._name}: stopped")

    def start(self) -> None:
        """Run the loop in a background daemon thread."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_forever, name=self._name, daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal cancellation and wait for the background thread."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None


__all__ = ["PeriodicTask"]

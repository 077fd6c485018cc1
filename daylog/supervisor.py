"""Background task supervision with a restart-then-fatal policy."""

import logging
import threading
from concurrent.futures import Future

logger = logging.getLogger(__name__)


class Supervisor:
    """Runs named tasks in daemon threads and reports how they ended.

    Each task gets an outcome Future: it resolves with None when the task
    returns, or with the exception once the task has crashed more than
    ``max_restarts`` times. A crash below that limit restarts the task in
    the same thread. ``on_fatal(name, exc)`` is called when a task gives up.
    """

    def __init__(self, max_restarts: int = 3, on_fatal=None):
        self._max_restarts = max_restarts
        self._on_fatal = on_fatal
        self._lock = threading.Lock()
        self._outcomes: dict[str, Future] = {}
        self._restarts: dict[str, int] = {}

    def spawn(self, name: str, target) -> Future:
        outcome: Future = Future()
        outcome.set_running_or_notify_cancel()
        with self._lock:
            self._outcomes[name] = outcome
            self._restarts[name] = 0
        thread = threading.Thread(
            target=self._run, args=(name, target, outcome),
            name=f"daylog-{name}", daemon=True,
        )
        thread.start()
        return outcome

    def restarts(self, name: str) -> int:
        with self._lock:
            return self._restarts.get(name, 0)

    def outcome(self, name: str) -> Future:
        with self._lock:
            return self._outcomes[name]

    def wait(self, name: str, timeout: float | None = None) -> BaseException | None:
        """Wait for a task to end for good. Returns its exception, if any.

        Raises concurrent.futures.TimeoutError if it is still running.
        """
        return self.outcome(name).exception(timeout=timeout)

    def _run(self, name: str, target, outcome: Future):
        while True:
            try:
                target()
            except Exception as exc:
                with self._lock:
                    restarts = self._restarts[name]
                    give_up = restarts >= self._max_restarts
                    if not give_up:
                        self._restarts[name] = restarts + 1
                if give_up:
                    logger.critical("Task %s failed after %d restart(s)", name, restarts,
                                    exc_info=True)
                    try:
                        if self._on_fatal is not None:
                            self._on_fatal(name, exc)
                    finally:
                        outcome.set_exception(exc)
                    return
                logger.exception("Task %s crashed, restarting (%d/%d)",
                                 name, restarts + 1, self._max_restarts)
                continue
            logger.debug("Task %s finished", name)
            outcome.set_result(None)
            return

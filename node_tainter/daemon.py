"""Fixed-interval driver for the reconciler."""

import threading

from node_tainter.logging_config import get_logger
from node_tainter.models.outcome import ReconciliationOutcome

logger = get_logger(__name__)

DEFAULT_INTERVAL = 300.0


class DaemonLoop:
    """Runs reconciliation once, or forever on a fixed interval."""

    def __init__(
        self,
        reconciler,
        node_name: str,
        daemon: bool = False,
        interval: float = DEFAULT_INTERVAL,
    ):
        """Initialize the loop.

        Args:
            reconciler: Object with a reconcile_once(node_name) method
            node_name: Node to reconcile
            daemon: If False, run a single cycle and return
            interval: Seconds to wait between the end of one cycle and the next
        """
        self.reconciler = reconciler
        self.node_name = node_name
        self.daemon = daemon
        self.interval = interval
        self.cycles = 0
        self._stop = threading.Event()

    def stop(self) -> None:
        """Ask the loop to exit after the current cycle; interrupts the wait."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run(self) -> ReconciliationOutcome | None:
        """
        Run the loop.

        In single-shot mode the cycle's outcome is returned and its errors
        propagate. In daemon mode errors are logged and the loop keeps going
        until stop() is called; None is returned.
        """
        if not self.daemon:
            self.cycles += 1
            return self.reconciler.reconcile_once(self.node_name)

        logger.info(f"Starting daemon for node {self.node_name}, interval {self.interval}s")
        while not self._stop.is_set():
            self.cycles += 1
            try:
                self.reconciler.reconcile_once(self.node_name)
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}", exc_info=True)
            self._stop.wait(self.interval)
        logger.info("Daemon stopped")
        return None

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class ConnectionMonitor:
    """Tracks whether the database is believed reachable.

    ``DataManager.ping`` (and so ``health_check``) flips the state from the
    outcome of its probe read; the retry executor only reads it.
    """

    def __init__(self, available: bool = True) -> None:
        self._available = available

    def is_available(self) -> bool:
        return self._available

    def mark_online(self) -> None:
        if not self._available:
            logger.info("Database connection restored")
        self._available = True

    def mark_offline(self) -> None:
        if self._available:
            logger.warning("Database marked unavailable")
        self._available = False

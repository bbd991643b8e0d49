"""Last-result-wins bookkeeping for overlapping directory refreshes."""

import logging
import threading
from datetime import datetime

from orgchart.hierarchy.models import ResolutionReport
from orgchart.utils.types import RefreshContext

logger = logging.getLogger(__name__)


class RefreshCoordinator:
    """Hands out refresh tokens and keeps only the newest completed report.

    A report completed under an older token than the one already accepted is
    stale and is discarded rather than merged.
    """

    def __init__(self, source: str = "directory"):
        self.source = source
        self._lock = threading.Lock()
        self._issued = 0
        self._accepted = 0
        self._in_flight: set[int] = set()
        self._current: ResolutionReport | None = None

    def begin(self) -> RefreshContext:
        with self._lock:
            self._issued += 1
            token = self._issued
            self._in_flight.add(token)
        return RefreshContext(source=self.source, token=token, started_at=datetime.now())

    def complete(self, context: RefreshContext, report: ResolutionReport) -> bool:
        """Accept ``report`` unless a newer refresh already completed."""
        with self._lock:
            self._in_flight.discard(context.token)
            if context.token <= self._accepted:
                logger.info(
                    "Discarding stale %s refresh #%d (current is #%d)",
                    self.source,
                    context.token,
                    self._accepted,
                )
                return False
            self._accepted = context.token
            self._current = report
            return True

    @property
    def current(self) -> ResolutionReport | None:
        with self._lock:
            return self._current

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._in_flight)

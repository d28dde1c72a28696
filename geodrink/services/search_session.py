"""Caller-side coordination of search cycles.

Each parameter change issues a new :class:`RequestToken`. Only the outcome of
the most recent token is applied to the active result set; a fetch that
completes after being superseded is discarded. Bursts of changes (for
example a slider being dragged) are debounced: a pending timer is cancelled
before it fires whenever a newer request arrives.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..config import DEBOUNCE_SECONDS
from ..models import Route, WaterPoint
from .water_service import SearchOutcome, WaterPointService

LOGGER = logging.getLogger(__name__)

UpdateCallback = Callable[[SearchOutcome], None]
TimerFactory = Callable[..., threading.Timer]


@dataclass(frozen=True, slots=True)
class RequestToken:
    generation: int
    buffer_m: float
    filter_id: str


class SearchSession:
    """Holds the loaded route and the active water point result set."""

    def __init__(
        self,
        service: WaterPointService,
        *,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        on_update: Optional[UpdateCallback] = None,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._service = service
        self._debounce_seconds = max(0.0, debounce_seconds)
        self._on_update = on_update
        self._timer_factory = timer_factory
        self._lock = threading.RLock()
        self._generation = 0
        self._route: Optional[Route] = None
        self._timer: Optional[threading.Timer] = None
        self._points: Tuple[WaterPoint, ...] = ()
        self._last_outcome: Optional[SearchOutcome] = None
        self._current_token: Optional[RequestToken] = None

    @property
    def route(self) -> Optional[Route]:
        return self._route

    @property
    def points(self) -> Tuple[WaterPoint, ...]:
        return self._points

    @property
    def last_outcome(self) -> Optional[SearchOutcome]:
        return self._last_outcome

    @property
    def current_token(self) -> Optional[RequestToken]:
        return self._current_token

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _invalidate(self) -> None:
        self._cancel_timer()
        self._generation += 1
        self._current_token = None

    def load_route(self, route: Route) -> None:
        """Replace the route; results for the previous route are dropped."""

        with self._lock:
            self._invalidate()
            self._route = route
            self._points = ()
            self._last_outcome = None

    def clear_route(self) -> None:
        with self._lock:
            self._invalidate()
            self._route = None
            self._points = ()
            self._last_outcome = None

    def clear_results(self) -> None:
        with self._lock:
            self._points = ()

    def cancel(self) -> None:
        """Cancel any pending debounced request."""

        with self._lock:
            self._cancel_timer()

    def issue_token(self, buffer_m: float, filter_id: str) -> RequestToken:
        with self._lock:
            self._generation += 1
            token = RequestToken(self._generation, float(buffer_m), filter_id)
            self._current_token = token
            return token

    def is_current(self, token: RequestToken) -> bool:
        with self._lock:
            return token.generation == self._generation

    def request(self, buffer_m: float, filter_id: str) -> RequestToken:
        """Schedule a debounced search, superseding any pending one."""

        with self._lock:
            self._cancel_timer()
            token = self.issue_token(buffer_m, filter_id)
            timer = self._timer_factory(
                self._debounce_seconds, self._execute, args=(token,)
            )
            timer.daemon = True
            self._timer = timer
            timer.start()
        LOGGER.debug(
            "Scheduled search generation=%d in %.2fs",
            token.generation,
            self._debounce_seconds,
        )
        return token

    def run_now(self, buffer_m: float, filter_id: str) -> Optional[SearchOutcome]:
        """Run a search synchronously, superseding any pending one."""

        with self._lock:
            self._cancel_timer()
            token = self.issue_token(buffer_m, filter_id)
        return self._execute(token)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the pending debounced search (if any) has finished."""

        with self._lock:
            timer = self._timer
        if timer is not None and timer.is_alive():
            timer.join(timeout)

    def _execute(self, token: RequestToken) -> Optional[SearchOutcome]:
        with self._lock:
            route = self._route
            if not self.is_current(token) or route is None:
                return None
        outcome = self._service.search(route, token.buffer_m, token.filter_id)
        self.apply(token, outcome)
        return outcome

    def apply(self, token: RequestToken, outcome: SearchOutcome) -> bool:
        """Store ``outcome`` as the active result set if ``token`` is current."""

        with self._lock:
            if token.generation != self._generation:
                LOGGER.debug(
                    "Discarding stale search result generation=%d (current=%d)",
                    token.generation,
                    self._generation,
                )
                return False
            self._points = outcome.points
            self._last_outcome = outcome
        if outcome.warning:
            LOGGER.warning("Search finished with warning: %s", outcome.warning)
        if self._on_update is not None:
            self._on_update(outcome)
        return True


__all__ = ["RequestToken", "SearchSession"]

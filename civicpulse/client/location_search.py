"""
Debounced location search box.

Keystrokes restart a timer; when it fires a geocoding request is issued with a
new sequence number. Responses are applied only if they belong to the latest
issued request, so a slow early answer cannot overwrite a faster later one.
In-flight requests are never cancelled.
"""

# Standard library imports
import asyncio
from collections.abc import Awaitable, Callable

# Local application imports
from civicpulse.core.exceptions import CivicPulseError
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.schemas.issues.location_schemas import LocationOption
from civicpulse.settings import settings

logger = get_logger(__name__)

Lookup = Callable[[str], Awaitable[list[LocationOption]]]


class LocationSearch:
    def __init__(
        self,
        lookup: Lookup,
        delay: float | None = None,
        min_length: int | None = None,
    ):
        self._lookup = lookup
        self.delay = settings.GEOCODING_DEBOUNCE_SECONDS if delay is None else delay
        self.min_length = settings.GEOCODING_MIN_QUERY_LENGTH if min_length is None else min_length

        self.text = ""
        self.options: list[LocationOption] = []
        self.error: str | None = None
        self.selected: LocationOption | None = None

        self._timer: asyncio.TimerHandle | None = None
        self._issued = 0
        self._applied = 0
        self._in_flight: set[asyncio.Task] = set()

    @property
    def is_loading(self) -> bool:
        return bool(self._in_flight)

    @property
    def latest_request(self) -> int:
        return self._issued

    def type(self, text: str) -> None:
        """Record a keystroke; must be called from a running event loop."""
        self.text = text
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if len(text.strip()) < self.min_length:
            # Outstanding responses belong to text that is no longer in the box.
            self._issued += 1
            self.options = []
            self.error = None
            return

        self._timer = asyncio.get_running_loop().call_later(self.delay, self._fire, text)

    def _fire(self, text: str) -> None:
        self._timer = None
        self._issued += 1
        task = asyncio.ensure_future(self._request(self._issued, text))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _request(self, sequence: int, text: str) -> None:
        try:
            options = await self._lookup(text)
        except CivicPulseError as e:
            if sequence == self._issued:
                logger.error(f"Error fetching locations: {e.message}")
                self.options = []
                self.error = e.message
                self._applied = sequence
            return

        if sequence < self._issued:
            logger.debug(f"Discarding stale location results for request {sequence} (latest {self._issued})")
            return

        self.options = options
        self.error = None
        self._applied = sequence

    async def settle(self) -> None:
        """Wait for the pending timer (if any) and every in-flight request."""
        while self._timer is not None or self._in_flight:
            if self._in_flight:
                await asyncio.gather(*list(self._in_flight))
            else:
                await asyncio.sleep(self.delay / 2 or 0.001)

    def select(self, option: LocationOption) -> LocationOption:
        self.selected = option
        self.text = option.label
        return option

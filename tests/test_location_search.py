"""
Tests for civicpulse/client/location_search.py

Debouncing, the minimum query length and discarding of stale responses.
"""

import asyncio

from civicpulse.client.location_search import LocationSearch
from civicpulse.core.exceptions import BackendError
from civicpulse.schemas.issues.location_schemas import LocationOption


def option(label):
    return LocationOption(label=label, lat=1.0, lng=2.0)


class RecordingLookup:
    def __init__(self, delays=None):
        self.queries = []
        self.delays = delays or {}

    async def __call__(self, text):
        self.queries.append(text)
        await asyncio.sleep(self.delays.get(text, 0))
        return [option(f"{text} result")]


class TestDebounce:
    def test_only_last_keystroke_is_looked_up(self):
        lookup = RecordingLookup()
        search = LocationSearch(lookup, delay=0.01, min_length=3)

        async def typing():
            for text in ("Spr", "Spri", "Spring"):
                search.type(text)
            await search.settle()

        asyncio.run(typing())
        assert lookup.queries == ["Spring"]
        assert search.options == [option("Spring result")]
        assert search.latest_request == 1

    def test_short_query_clears_without_lookup(self):
        lookup = RecordingLookup()
        search = LocationSearch(lookup, delay=0.01, min_length=3)
        search.options = [option("old")]

        async def typing():
            search.type("Sp")
            await search.settle()

        asyncio.run(typing())
        assert lookup.queries == []
        assert search.options == []


class TestStaleResponses:
    def test_slow_early_response_does_not_overwrite_later_one(self):
        lookup = RecordingLookup(delays={"Paris": 0.2, "Parma": 0})
        search = LocationSearch(lookup, delay=0.01, min_length=3)

        async def typing():
            search.type("Paris")
            await asyncio.sleep(0.05)  # first request is now in flight
            assert search.is_loading
            search.type("Parma")
            await search.settle()

        asyncio.run(typing())
        assert lookup.queries == ["Paris", "Parma"]
        assert search.options == [option("Parma result")]
        assert not search.is_loading

    def test_clearing_the_box_drops_the_in_flight_response(self):
        lookup = RecordingLookup(delays={"Paris": 0.1})
        search = LocationSearch(lookup, delay=0.01, min_length=3)

        async def typing():
            search.type("Paris")
            await asyncio.sleep(0.05)
            assert search.is_loading
            search.type("")
            await search.settle()

        asyncio.run(typing())
        assert lookup.queries == ["Paris"]
        assert search.text == ""
        assert search.options == []
        assert search.error is None

    def test_error_on_latest_request_is_reported(self):
        async def failing(text):
            raise BackendError("Failed to fetch locations")

        search = LocationSearch(failing, delay=0.01, min_length=3)

        async def typing():
            search.type("Berlin")
            await search.settle()

        asyncio.run(typing())
        assert search.options == []
        assert search.error == "Failed to fetch locations"


def test_select_fills_input():
    search = LocationSearch(RecordingLookup(), delay=0.01, min_length=3)
    chosen = search.select(option("Springfield, IL"))
    assert search.selected == chosen
    assert search.text == "Springfield, IL"

# Standard library imports
from typing import Any
from urllib.parse import quote

# Third-party imports
import httpx

# Local application imports
from civicpulse.core.exceptions import BackendError
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.schemas.issues.location_schemas import LocationOption
from civicpulse.settings import settings

logger = get_logger(__name__)


class GeocodingService:
    """Forward geocoding against the Mapbox places API."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        limit: int | None = None,
        min_query_length: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token if access_token is not None else settings.MAPBOX_ACCESS_TOKEN
        self.base_url = (base_url or settings.MAPBOX_GEOCODING_URL).rstrip("/")
        self.limit = limit or settings.GEOCODING_RESULT_LIMIT
        self.min_query_length = min_query_length or settings.GEOCODING_MIN_QUERY_LENGTH
        self.transport = transport

    @staticmethod
    def parse_features(payload: dict[str, Any]) -> list[LocationOption]:
        # Mapbox centers are [lng, lat]
        return [
            LocationOption(label=feature["place_name"], lat=feature["center"][1], lng=feature["center"][0])
            for feature in payload.get("features", [])
            if feature.get("place_name") and len(feature.get("center") or []) == 2
        ]

    async def search(self, text: str) -> list[LocationOption]:
        """
        Ranked places matching ``text``. Queries shorter than the minimum length
        return an empty list without calling the provider.
        """
        query = text.strip()
        if len(query) < self.min_query_length:
            return []

        url = f"{self.base_url}/{quote(query)}.json"
        params = {"access_token": self.access_token, "types": "place,address", "limit": self.limit}

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=settings.GEOCODING_TIMEOUT_SECONDS) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(f"Geocoding failed with status {exc.response.status_code}: {exc.response.text}")
            raise BackendError("Failed to fetch locations") from exc
        except httpx.HTTPError as exc:
            logger.error(f"Error fetching locations: {exc}")
            raise BackendError("Failed to fetch locations") from exc

        return self.parse_features(response.json())

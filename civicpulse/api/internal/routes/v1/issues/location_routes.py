# Third-party imports
from fastapi import APIRouter, Depends, Query

# Local application imports
from civicpulse.schemas.issues.location_schemas import LocationOption
from civicpulse.services.geocoding.geocoding_service import GeocodingService


def get_geocoding_service() -> GeocodingService:
    return GeocodingService()


router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("/search", response_model=list[LocationOption])
async def search_locations(
    q: str = Query("", max_length=200),
    geocoder: GeocodingService = Depends(get_geocoding_service),
):
    """Places matching the query; fewer than 3 characters returns an empty list"""
    return await geocoder.search(q)

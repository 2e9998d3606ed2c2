# Third-party imports
from pydantic import BaseModel


class LocationOption(BaseModel):
    label: str
    lat: float
    lng: float

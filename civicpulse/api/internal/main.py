# Standard library imports
from typing import TypeVar

# Third-party imports
from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute

# Local application imports
from civicpulse.api.internal.routes.v1.routes import router as v1_router

ParentT = TypeVar("ParentT", APIRouter, FastAPI)


def remove_trailing_slashes_from_routes(parent: ParentT) -> ParentT:
    """
    Strip trailing slashes so collection routes answer on ``/issues`` rather than ``/issues/``.

    Paths are recompiled when the router is included into the app.
    """
    for route in parent.routes:
        if isinstance(route, APIRoute) and route.path != "/":
            route.path = route.path.rstrip("/")

    return parent


router = APIRouter()
router.include_router(v1_router)
router = remove_trailing_slashes_from_routes(router)

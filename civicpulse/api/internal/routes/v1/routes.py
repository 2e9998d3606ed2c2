# Third-party imports
from fastapi import APIRouter

# Local application imports
from civicpulse.api.internal.routes.v1.auth import auth_router, profile_router
from civicpulse.api.internal.routes.v1.issues import (
    analytics_router,
    issue_router,
    location_router,
    map_router,
    vote_router,
)

router = APIRouter()

router.include_router(auth_router)
router.include_router(profile_router)
router.include_router(issue_router)
router.include_router(vote_router)
router.include_router(analytics_router)
router.include_router(map_router)
router.include_router(location_router)

from .analytics_routes import router as analytics_router
from .issue_routes import router as issue_router
from .location_routes import router as location_router
from .map_routes import router as map_router
from .vote_routes import router as vote_router

__all__ = ["issue_router", "vote_router", "analytics_router", "map_router", "location_router"]

from .auth_routes import router as auth_router
from .profile_routes import router as profile_router

__all__ = ["auth_router", "profile_router"]

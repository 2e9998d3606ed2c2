# Local application imports
from civicpulse.models.auth.user import User

__all__ = ["User"]

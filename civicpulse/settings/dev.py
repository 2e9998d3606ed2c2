# Local application imports
from civicpulse.settings.common import CommonSettings


class DevSettings(CommonSettings):
    DEBUG_MODE: bool = True

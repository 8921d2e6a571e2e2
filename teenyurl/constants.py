import string
from enum import StrEnum


class Shortcode:
    """Shortcode generation parameters."""

    ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
    LENGTH = 4  # Default length of generated shortcodes
    FALLBACK_LENGTH = 5  # Length used once too many 4-character codes collide
    FALLBACK_AFTER_ATTEMPTS = 3  # Switch to FALLBACK_LENGTH after more than this many failed attempts
    MAX_ATTEMPTS = 5  # Give up after this many generation attempts


class Time:
    """Durations in milliseconds."""

    ONE_MINUTE = 60_000
    ONE_HOUR = 3_600_000
    ONE_DAY = 86_400_000


# Short URL base used when BASE_URL is not configured
DEFAULT_BASE_URL = 'https://www.teenyweenyurl.xyz'

# Path segment between the base URL and the shortcode
REDIRECT_PATH = 'r'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        BASE_URL = 'BASE_URL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


class Backend(StrEnum):
    """Data store backends selectable through AppConfig's `active_backend`."""

    REDIS = 'redis'
    MEMORY = 'memory'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

# =============================================================================
# mobile_core/constants.py
# Shared Constants (routes, storage keys, user-facing messages)
# =============================================================================


class ApiRoutes:
    """Remote endpoint and the routes the app talks to."""
    BASE_URL = "https://jsonplaceholder.typicode.com"
    POSTS = "posts"
    USERS = "users"


class NetworkExceptionMessages:
    """Messages carried by NetworkException. Never include transport details."""
    GENERAL = "Something went wrong. Please try again later."


class LocalStorageKeys:
    """Stable box keys. Renaming one orphans the data already on disk."""
    POSTS = "posts"
    USERS = "users"


class ViewRoutes:
    """Named routes handed to the navigation collaborator."""
    LOGIN = "login"
    HOME = "home"
    SETTINGS = "settings"


class LogDefaults:
    """Logging settings used when the configuration does not override them."""
    FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
    FILE_PATTERN = "mobile_core_{date:%Y-%m-%d}.log"
    SUBDIR = "logs"
    QUIET_LOGGERS = ("urllib3", "requests")

"""Build the configured Link DAO for a lambda

Example:
    >>> from teenyurl.utils import load_config, app_prefix
    >>> dao = link_dao_from_config(load_config('redirect_url'), prefix=app_prefix())
    >>> type(dao).__name__
    'LinkRedisDAO'
"""

import functools

from teenyurl.constants import Backend
from teenyurl.types import LambdaConfiguration
from teenyurl.exceptions import BadConfigurationError
from teenyurl.dao.base import LinkBaseDAO
from teenyurl.dao.memory import LinkMemoryDAO
from teenyurl.dao.redis import LinkRedisDAO


@functools.cache
def shared_memory_dao() -> LinkMemoryDAO:
    """One in-memory store per process, so links outlive a single invocation."""
    return LinkMemoryDAO()


def link_dao_from_config(config: LambdaConfiguration, prefix: str | None = None) -> LinkBaseDAO:
    """Instantiate the DAO for the single backend present in a lambda configuration

    Args:
        config (dict):
            Output of load_config(), i.e. {<backend>: <backend settings>}.
        prefix (str, optional):
            Key namespace for backends that support one.

    Raises:
        BadConfigurationError:
            If the configuration names no backend, several backends, or an unknown one.
        DataStoreError:
            If the backend is unreachable.
    """
    if len(config) != 1:
        raise BadConfigurationError(f'Expected exactly one active backend (given: {sorted(config)}).')

    [(backend, settings)] = config.items()
    match backend:
        case Backend.REDIS:
            return LinkRedisDAO(**{f'redis_{k}': v for k, v in (settings or {}).items()}, prefix=prefix)
        case Backend.MEMORY:
            return shared_memory_dao()
        case _:
            raise BadConfigurationError(f"Unknown data store backend '{backend}'.")

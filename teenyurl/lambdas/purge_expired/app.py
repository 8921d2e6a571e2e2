import json
import logging
from typing import Any

from teenyurl.dao import link_dao_from_config
from teenyurl.dao.exceptions import DataStoreError
from teenyurl.exceptions import ConfigurationError
from teenyurl.registry import LinkRegistry
from teenyurl.utils import load_config, app_prefix
from teenyurl.lambdas.purge_expired.constants import SUCCESS, ERROR


logger = logging.getLogger(__name__)


def response_success(*, purged: int) -> str:
    return json.dumps(
        {
            'status': SUCCESS,
            'purged': purged,
            'message': f'Successfully purged {purged} expired link(s)',
        }
    )


def response_error(*, error: Exception) -> str:
    return json.dumps(
        {
            'status': ERROR,
            'message': 'Failed to purge expired links',
            'reason': str(error),
            'error': error.__class__.__name__,
        }
    )


def lambda_handler(event: dict, context: Any) -> str:
    """Remove every expired link from the data store

    Runs on an EventBridge schedule. Expired links are also evicted lazily on
    redirect; this sweeps the ones nobody visits.

    Diagnostic responses:
        success:
            status: success
            purged: <number of removed links>
            message: Successfully purged <n> expired link(s)
        error:
            status: error
            message: Failed to purge expired links
            reason: <reason>
            error: <error class name> (e.g. DataStoreError, BadConfigurationError)

    Example:
        >>> json.loads(lambda_handler({}, None))
        {'status': 'success', 'purged': 3, 'message': 'Successfully purged 3 expired link(s)'}
    """
    try:
        dao = link_dao_from_config(load_config('purge_expired'), prefix=app_prefix())
        purged = LinkRegistry(dao).purge_expired()
    except (ConfigurationError, DataStoreError) as error:
        logger.exception(
            'Failed to purge expired links.',
            extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return response_error(error=error)

    logger.info('Purged expired links.', extra={'event': SUCCESS, 'purged': purged})
    return response_success(purged=purged)

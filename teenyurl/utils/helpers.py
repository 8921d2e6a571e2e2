"""Helper utilities for link handling and AWS lambda functions.

Functions:
    now_ms() -> int
        Current UTC time in epoch milliseconds
    base_url() -> str
        Public base URL for short links
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    format_expiration() -> str
        Human readable remaining lifetime of a link
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unhandled lambda errors into a 500 response

Example:
    >>> from teenyurl.utils.helpers import get_short_url
    >>> get_short_url('aB3x')
    'https://www.teenyweenyurl.xyz/r/aB3x'
    >>> get_short_url('aB3x', 'links.example.com')
    'https://links.example.com/r/aB3x'
"""

import os
import json
import logging
import functools
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable

from teenyurl.constants import DEFAULT_BASE_URL, ENV, REDIRECT_PATH, Time, UNKNOWN_INTERNAL_SERVER_ERROR
from teenyurl.exceptions import MissingEnvironmentVariableError
from teenyurl.utils.runtime import running_locally
from teenyurl.utils.validation import normalize_domain


logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(datetime.now(UTC).timestamp() * 1000)


def base_url(event: dict[str, Any] | None = None) -> str:
    """Return the public base URL for short links

    When an API Gateway event carries a domain name, the base URL is derived
    from it: custom domains are used as-is, default AWS execute-api domains
    include the stage name. Otherwise the `BASE_URL` environment variable is
    used, falling back to the production domain.

    Args:
        event (dict, optional): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL without a trailing slash, e.g.:
             - "https://www.teenyweenyurl.xyz"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = (event or {}).get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        return f'https://{domain}'
    elif domain:
        return f'https://{domain}/{stage}'
    else:
        return os.environ.get(ENV.App.BASE_URL, DEFAULT_BASE_URL).rstrip('/')


def get_short_url(shortcode: str, custom_domain: str | None = None, base: str | None = None) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        custom_domain (str, optional): link's custom domain, with or without scheme
        base (str, optional): base URL used when there is no custom domain

    Returns:
        str: short url string representation as {base}/r/{shortcode}
    """
    if custom_domain:
        root = normalize_domain(custom_domain)
    else:
        root = (base or base_url()).rstrip('/')
    return f'{root}/{REDIRECT_PATH}/{shortcode}'


def format_expiration(expires_at: int | None, now: int | None = None) -> str:
    """Describe how long a link remains valid

    Example:
        >>> format_expiration(None)
        'Never'
        >>> format_expiration(now_ms() + 2 * Time.ONE_DAY + 5)
        '2 days'
    """
    if expires_at is None:
        return 'Never'

    remaining = expires_at - (now_ms() if now is None else now)
    if remaining <= 0:
        return 'Expired'

    for unit, size in (('day', Time.ONE_DAY), ('hour', Time.ONE_HOUR)):
        amount = remaining // size
        if amount > 0:
            return f'{amount} {unit}{"s" if amount > 1 else ""}'

    minutes = remaining // Time.ONE_MINUTE
    return f'{minutes} minute{"" if minutes == 1 else "s"}'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with 500 instead of crashing on unhandled errors

    When running locally the original exception is re-raised so it shows up
    in SAM output and tests.
    """

    @functools.wraps(handler)
    def wrapper(event: dict, context: Any) -> dict:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled error in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper

import logging
from typing import Any

from teenyurl.dao import link_dao_from_config
from teenyurl.dao.exceptions import LinkExpiredError, LinkNotFoundError
from teenyurl.exceptions import ConfigurationError
from teenyurl.registry import LinkRegistry
from teenyurl.utils import load_config, app_prefix, base_url, get_short_url, normalize_url
from teenyurl.utils.helpers import guarantee_500_response
from teenyurl.lambdas.responses import response_302, response_400, response_404, response_410, response_500
from teenyurl.lambdas.redirect_url.constants import (
    CONFIGURATION_ERROR,
    MISSING_SHORTCODE,
    REDIRECT_SUCCESS,
    SHORT_URL_EXPIRED,
    SHORT_URL_NOT_FOUND,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the link and count the click
    - Step 3: Redirect client to the original URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: original URL
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: no link uses the shortcode
        410: Gone
            message: the link has expired (and was removed)
        500: Internal server error
            message: server experienced an internal error

    Args:
        event (dict):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'aB3x'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for redirect URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    registry = LinkRegistry(link_dao_from_config(app_config, prefix=app_prefix()), base_url=base_url(event))
    short_url = get_short_url(shortcode, base=registry.base_url)
    logger.debug('Client requested short URL %s.', short_url)

    # 2- Resolve the link and count the click
    try:
        link = registry.track_click(shortcode)
    except LinkExpiredError:
        logger.info('Short URL has expired. Responding with 410.', extra={'shortcode': shortcode, 'event': SHORT_URL_EXPIRED})
        return response_410(message=f'short url {short_url} has expired', error_code=SHORT_URL_EXPIRED)
    except LinkNotFoundError:
        logger.info('Short URL record not found in database. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        return response_404(message=f"short url {short_url} doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    # 3- Redirect client to the original URL
    logger.info(
        'Redirecting client to original URL. Responding with 302.',
        extra={'shortcode': shortcode, 'clicks': link.clicks, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=normalize_url(link.original_url))

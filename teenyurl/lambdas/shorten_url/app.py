import json
import logging
from typing import Any

from teenyurl.dao import link_dao_from_config
from teenyurl.exceptions import (
    CodeGenerationExhaustedError,
    CodeUnavailableError,
    ConfigurationError,
    LinkValidationError,
)
from teenyurl.registry import LinkRegistry
from teenyurl.utils import load_config, app_prefix, base_url, format_expiration, now_ms
from teenyurl.utils.helpers import guarantee_500_response
from teenyurl.lambdas.responses import response_json, response_400, response_409, response_500, response_503
from teenyurl.lambdas.shorten_url.constants import (
    CODE_GENERATION_EXHAUSTED,
    CODE_UNAVAILABLE,
    CONFIGURATION_ERROR,
    INVALID_EXPIRES_IN,
    INVALID_JSON,
    MISSING_TARGET_URL,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


def _expires_at(expires_in: Any) -> int | None:
    """Turn a relative lifetime in seconds into an absolute epoch-ms timestamp"""
    if expires_in is None:
        return None
    if isinstance(expires_in, bool) or not isinstance(expires_in, int) or expires_in <= 0:
        raise ValueError(f"'expires_in' must be a positive number of seconds, got {expires_in!r}")
    return now_ms() + expires_in * 1000


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract link parameters from request body
    - Step 2: Create the link (validate, allocate shortcode, store)
    - Step 3: Respond to user with 200 success

    Request body:
        target_url (str): URL to shorten (required)
        custom_code (str): user-chosen shortcode
        custom_domain (str): domain to display the short URL under
        expires_in (int): link lifetime in seconds

    HTTP responses:
        200: Successful URL shortening
            message: success message
            target_url: stored (normalized) url
            short_url: newly generated short url
            shortcode: allocated shortcode
            id: link id
            expires_at: expiry in epoch milliseconds or null
            expiration: human readable remaining lifetime
        400: Bad client request
            message: invalid JSON, missing target_url, bad expires_in or failed validation
        409: Conflict
            message: custom shortcode already in use
        503: Service unavailable
            message: could not allocate a unique shortcode, retry later
        500: Internal server error
            message: indicate the server experienced an internal error

    Args:
        event (Dict[str, Any]):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        Dict[str, Any]:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'body': '{"target_url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['message']
        Successfully shortened https://example.com to https://www.teenyweenyurl.xyz/r/aB3x
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Extract link parameters from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON)

    target_url = request_body.get('target_url')
    if not target_url or not isinstance(target_url, str):
        logger.info('Missing "target_url" in JSON body. Responding with 400.', extra={'event': MISSING_TARGET_URL})
        return response_400(message="missing 'target_url' in JSON body", error_code=MISSING_TARGET_URL)

    try:
        expires_at = _expires_at(request_body.get('expires_in'))
    except ValueError as e:
        logger.info('Invalid "expires_in" in JSON body. Responding with 400.', extra={'event': INVALID_EXPIRES_IN})
        return response_400(message=str(e), error_code=INVALID_EXPIRES_IN)

    # 2- Create the link
    registry = LinkRegistry(link_dao_from_config(app_config, prefix=app_prefix()), base_url=base_url(event))
    try:
        link = registry.create(
            target_url,
            custom_code=request_body.get('custom_code'),
            expires_at=expires_at,
            custom_domain=request_body.get('custom_domain'),
        )
    except LinkValidationError as e:
        logger.info('Link parameters failed validation. Responding with 400.', extra={'event': e.error_code, 'reason': str(e)})
        return response_400(message=str(e), error_code=e.error_code)
    except CodeUnavailableError as e:
        logger.info('Custom shortcode unavailable. Responding with 409.', extra={'event': CODE_UNAVAILABLE})
        return response_409(message=str(e), error_code=CODE_UNAVAILABLE)
    except CodeGenerationExhaustedError as e:
        logger.warning('Could not allocate a shortcode. Responding with 503.', extra={'event': CODE_GENERATION_EXHAUSTED})
        return response_503(message=str(e), error_code=CODE_GENERATION_EXHAUSTED)

    # 3- Return successful response to user
    short_url = registry.short_url(link)
    logger.info('Shortened URL. Responding with 200.', extra={'shortcode': link.shortcode, 'linkId': link.id, 'event': SHORTEN_SUCCESS})
    return response_json(
        200,
        {
            'message': f'Successfully shortened {link.original_url} to {short_url}',
            'target_url': link.original_url,
            'short_url': short_url,
            'shortcode': link.shortcode,
            'id': link.id,
            'expires_at': link.expires_at,
            'expiration': format_expiration(link.expires_at),
        },
    )

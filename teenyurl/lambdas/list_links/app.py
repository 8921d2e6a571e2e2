import logging
from typing import Any

from teenyurl.dao import link_dao_from_config
from teenyurl.exceptions import ConfigurationError
from teenyurl.registry import LinkRegistry, LinkOrder
from teenyurl.utils import load_config, app_prefix, base_url
from teenyurl.utils.helpers import guarantee_500_response
from teenyurl.lambdas.responses import link_to_json, response_json, response_400, response_500
from teenyurl.lambdas.list_links.constants import CONFIGURATION_ERROR, INVALID_SORT_ORDER, LIST_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """List stored links for the dashboard

    Query parameters:
        search (str): case-insensitive substring of original URL or shortcode
        sort (str): one of 'newest' (default), 'oldest', 'most-clicks'

    HTTP responses:
        200: links, count and overview counters (over all links)
        400: unknown sort order
        500: internal server error
    """
    try:
        app_config = load_config('list_links')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for list links function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    params = event.get('queryStringParameters') or {}
    order = params.get('sort') or LinkOrder.NEWEST
    if order not in set(LinkOrder):
        logger.info('Unknown sort order. Responding with 400.', extra={'sort': order, 'event': INVALID_SORT_ORDER})
        allowed = ', '.join(LinkOrder)
        return response_400(message=f"unknown sort order '{order}', expected one of: {allowed}", error_code=INVALID_SORT_ORDER)

    registry = LinkRegistry(link_dao_from_config(app_config, prefix=app_prefix()), base_url=base_url(event))
    links = registry.list_all()
    matches = registry.sort_by(order, registry.search(params.get('search') or '', links))
    overview = registry.overview()

    logger.info('Listed links. Responding with 200.', extra={'count': len(matches), 'event': LIST_SUCCESS})
    return response_json(
        200,
        {
            'links': [link_to_json(link, registry.short_url(link)) for link in matches],
            'count': len(matches),
            'overview': {
                'total_links': overview.total_links,
                'total_clicks': overview.total_clicks,
                'average_clicks': overview.average_clicks,
                'top_links': [link.shortcode for link in overview.top_links],
            },
        },
    )

"""API Gateway (Lambda Proxy) response builders shared by the HTTP lambdas"""

import json
from typing import Any

from teenyurl.models import LinkModel
from teenyurl.types import LambdaResponse
from teenyurl.utils.helpers import format_expiration


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def response_json(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(status_code: int, base: str, message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return response_json(status_code, body)


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(400, 'Bad Request', message, error_code)


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(404, 'Not Found', message, error_code)


def response_409(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(409, 'Conflict', message, error_code)


def response_410(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(410, 'Gone', message, error_code)


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(500, 'Internal Server Error', message, error_code)


def response_503(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(503, 'Service Unavailable', message, error_code)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def link_to_json(link: LinkModel, short_url: str) -> dict[str, Any]:
    return {
        'id': link.id,
        'original_url': link.original_url,
        'shortcode': link.shortcode,
        'short_url': short_url,
        'created_at': link.created_at,
        'clicks': link.clicks,
        'expires_at': link.expires_at,
        'expiration': format_expiration(link.expires_at),
        'custom_code': link.custom_code,
        'custom_domain': link.custom_domain,
    }

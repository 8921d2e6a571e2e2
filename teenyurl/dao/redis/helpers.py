import functools
from typing import Any

import redis

from teenyurl.models import LinkModel
from teenyurl.dao.exceptions import DataStoreError


__all__ = []


def describe_connection(client: redis.Redis) -> str:
    """Render a client's target as `host:port/db` for error messages"""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            redis.exceptions.ConnectionError or redis.exceptions.TimeoutError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def get_all(self):
        ...     return self.redis.smembers('links:index')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {describe_connection(self.redis)}.") from e

    return wrapper


def encode_field(value: Any) -> str | int:
    """Encode a LinkModel field value for a Redis hash (redis-py rejects bools)"""
    if isinstance(value, bool):
        return int(value)
    return value


def to_redis_mapping(link: LinkModel) -> dict[str, str | int]:
    """Serialize a LinkModel into a Redis hash mapping

    Optional fields holding None are omitted (a missing hash field reads back as None).
    The identifier is not stored in the hash: it is part of the key.

    Example:
        >>> to_redis_mapping(LinkModel(original_url='https://example.com', shortcode='aB3x', created_at=1))
        {'original_url': 'https://example.com', 'shortcode': 'aB3x', 'created_at': 1, 'clicks': 0, 'custom_code': 0}
    """
    # fmt: off
    mapping = {
        'original_url': link.original_url,
        'shortcode': link.shortcode,
        'created_at': link.created_at,
        'clicks': link.clicks,
        'expires_at': link.expires_at,
        'custom_code': link.custom_code,
        'custom_domain': link.custom_domain,
    }
    # fmt: on
    return {field: encode_field(value) for field, value in mapping.items() if value is not None}


def from_redis_mapping(link_id: str, mapping: dict[str, str]) -> LinkModel:
    """Deserialize a Redis hash mapping (decoded responses) into a LinkModel"""
    expires_at = mapping.get('expires_at')
    return LinkModel(
        id=link_id,
        original_url=mapping['original_url'],
        shortcode=mapping['shortcode'],
        created_at=int(mapping['created_at']),
        clicks=int(mapping.get('clicks', 0)),
        expires_at=None if expires_at is None else int(expires_at),
        custom_code=mapping.get('custom_code') == '1',
        custom_domain=mapping.get('custom_domain') or None,
    )

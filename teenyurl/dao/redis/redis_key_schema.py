import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing links.

    Layout:
        links:<id>             HASH   serialized LinkModel fields
        links:index            SET    identifiers of all stored links
        links:counter          STRING identifier sequence
        shortcodes:<code>      STRING identifier of the link claiming <code>

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "teenyurl:prod" or "teenyurl:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, link_id: str) -> str:
        return f'links:{link_id}'

    @prefix_key
    def index_key(self) -> str:
        return 'links:index'

    @prefix_key
    def counter_key(self) -> str:
        return 'links:counter'

    @prefix_key
    def shortcode_key(self, shortcode: str) -> str:
        return f'shortcodes:{shortcode}'

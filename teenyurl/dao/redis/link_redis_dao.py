"""Data Access Object (DAO) implementation for managing links in Redis

This module provides a Redis-based implementation of LinkBaseDAO.

Responsibilities:
    - Store every link as a hash under links:<id> and track identifiers in links:index;
    - Claim shortcodes atomically with SET NX on shortcodes:<code>;
    - Increment click counters atomically with a server-side EXISTS + HINCRBY script;
    - Raise DataStoreError on connectivity issues.

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> import redis

from teenyurl.models import LinkModel
    >>> from teenyurl.dao.redis import LinkRedisDAO

    >>> dao = LinkRedisDAO(prefix='teenyurl:dev')

    >>> link = LinkModel(original_url='https://example.com/page', shortcode='aB3x', created_at=1760000000000)
    >>> link_id = dao.put_if_absent(link)
    >>> link_id
    '1'
    >>> dao.find_by('shortcode', 'aB3x')[0].original_url
    'https://example.com/page'
    >>> dao.increment(link_id)
    1
"""

from typing import Any

import redis
from beartype import beartype

from teenyurl.models import LinkModel
from teenyurl.dao.base import LinkBaseDAO
from teenyurl.dao.redis.mixins import RedisClientMixin
from teenyurl.dao.redis.helpers import handle_redis_connection_error, encode_field, to_redis_mapping, from_redis_mapping
from teenyurl.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


# HINCRBY only on an existing hash, so a link removed concurrently is not recreated as {clicks: n}
INCREMENT_IF_EXISTS = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return redis.call('HINCRBY', KEYS[1], ARGV[1], ARGV[2])
end
return nil
"""


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing links

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    NOTE:
        - Shortcode lookups follow the shortcodes:<code> claim. A link inserted
          with put() over an already claimed shortcode takes over the claim.
    """

    @handle_redis_connection_error
    @beartype
    def put(self, link: LinkModel) -> str:
        """Insert a link unconditionally and point its shortcode claim at it

        Returns:
            str: identifier of the stored link (the link's own id, or the next
                 value of the links:counter sequence).
        """
        link_id = link.id or self._next_id()

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(self.keys.link_key(link_id), mapping=to_redis_mapping(link))
            pipe.sadd(self.keys.index_key(), link_id)
            pipe.set(self.keys.shortcode_key(link.shortcode), link_id)
            pipe.execute()
        return link_id

    @handle_redis_connection_error
    @beartype
    def put_if_absent(self, link: LinkModel) -> str:
        """Claim the link's shortcode and insert the link

        The claim is a single SET NX, so of two concurrent callers with the same
        shortcode exactly one wins.

        NOTE: The claim and the hash write are separate round trips. A reader
              between them follows the claim to a missing hash and sees no link:

              (lambda 1): LinkRedisDAO.put_if_absent():
                          -> SET <app>:shortcodes:<code> <id> NX
                          ... interruption
              (lambda 2): LinkRedisDAO.find_by('shortcode', <code>):
                          -> GET <app>:shortcodes:<code>   => <id>
                          -> HGETALL <app>:links:<id>      => {}  (not found)
              (lambda 1): LinkRedisDAO.put_if_absent() continued...:
                          -> HSET <app>:links:<id> ...

              Creation never races with resolution of the same code in practice,
              since the code is only handed out after this method returns.

              If writing the hash fails, the claim is released before the error
              propagates, so the shortcode stays available.

        Raises:
            LinkAlreadyExistsError:
                If the shortcode is already claimed.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_id = link.id or self._next_id()

        if not self.redis.set(self.keys.shortcode_key(link.shortcode), link_id, nx=True):
            raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")

        try:
            with self.redis.pipeline(transaction=True) as pipe:
                pipe.hset(self.keys.link_key(link_id), mapping=to_redis_mapping(link))
                pipe.sadd(self.keys.index_key(), link_id)
                pipe.execute()
        except redis.exceptions.RedisError:
            self._release_shortcode(link.shortcode, link_id)
            raise
        return link_id

    @handle_redis_connection_error
    @beartype
    def update(self, link_id: str, **fields: Any) -> bool:
        self._check_update_fields(fields)

        link_key = self.keys.link_key(link_id)
        old_shortcode = self.redis.hget(link_key, 'shortcode')
        if old_shortcode is None:
            return False

        to_set = {field: encode_field(value) for field, value in fields.items() if value is not None}
        to_delete = [field for field, value in fields.items() if value is None]

        with self.redis.pipeline(transaction=True) as pipe:
            if to_set:
                pipe.hset(link_key, mapping=to_set)
            if to_delete:
                pipe.hdel(link_key, *to_delete)
            if fields.get('shortcode') not in (None, old_shortcode):
                pipe.set(self.keys.shortcode_key(fields['shortcode']), link_id)
            pipe.execute()

        if fields.get('shortcode') not in (None, old_shortcode):
            self._release_shortcode(old_shortcode, link_id)
        return True

    @handle_redis_connection_error
    @beartype
    def remove(self, link_id: str) -> bool:
        link_key = self.keys.link_key(link_id)
        shortcode = self.redis.hget(link_key, 'shortcode')

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(link_key)
            pipe.srem(self.keys.index_key(), link_id)
            deleted, _ = pipe.execute()

        if shortcode is not None:
            self._release_shortcode(shortcode, link_id)
        return bool(deleted)

    @handle_redis_connection_error
    def get_all(self) -> list[LinkModel]:
        link_ids = sorted(self.redis.smembers(self.keys.index_key()))
        if not link_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for link_id in link_ids:
                pipe.hgetall(self.keys.link_key(link_id))
            mappings = pipe.execute()

        return [from_redis_mapping(link_id, mapping) for link_id, mapping in zip(link_ids, mappings) if mapping]

    @handle_redis_connection_error
    @beartype
    def find_by(self, field: str, value: Any) -> list[LinkModel]:
        self._check_field(field)

        if field == 'shortcode':
            link_id = self.redis.get(self.keys.shortcode_key(value))
            if link_id is None:
                return []
            mapping = self.redis.hgetall(self.keys.link_key(link_id))
            return [from_redis_mapping(link_id, mapping)] if mapping else []

        return [link for link in self.get_all() if getattr(link, field) == value]

    @handle_redis_connection_error
    @beartype
    def increment(self, link_id: str, field: str = 'clicks', amount: int = 1) -> int:
        self._check_counter_field(field)
        self._check_increment_amount(amount)

        value = self.redis.eval(INCREMENT_IF_EXISTS, 1, self.keys.link_key(link_id), field, amount)
        if value is None:
            raise LinkNotFoundError(f"Link with id '{link_id}' not found.")
        return int(value)

    def _next_id(self) -> str:
        return str(self.redis.incr(self.keys.counter_key()))

    def _release_shortcode(self, shortcode: str, link_id: str) -> None:
        """Delete a shortcode claim, only if it still belongs to link_id"""
        shortcode_key = self.keys.shortcode_key(shortcode)
        if self.redis.get(shortcode_key) == link_id:
            self.redis.delete(shortcode_key)

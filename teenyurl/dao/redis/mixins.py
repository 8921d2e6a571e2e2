"""Shared Redis client wiring for Redis-backed link DAOs

A DAO either receives a ready client (tests, long-lived workers) or builds one
from the `redis_*` keyword arguments that `link_dao_from_config()` forwards from
the AppConfig section of the active backend:

    {"redis": {"host": "redis", "port": 6379, "db": 0}}
        -> LinkRedisDAO(redis_host='redis', redis_port=6379, redis_db=0, prefix=...)

A `url` setting (`redis_url`) takes precedence over host/port/db.

Every new DAO PINGs its server once so that a misconfigured backend fails at
construction time instead of on the first shorten or redirect.
"""

import redis

from teenyurl.dao.exceptions import DataStoreError
from teenyurl.dao.redis.helpers import describe_connection
from teenyurl.dao.redis.redis_key_schema import RedisKeySchema


class RedisClientMixin:
    """Client setup, key schema and healthcheck for Redis DAOs

    Attributes:
        redis (redis.Redis): client used by the DAO; responses are decoded to str.
        keys (RedisKeySchema): namespaced key names for links and shortcode claims.
    """

    def __init__(
        self,
        redis_host: str | None = 'localhost',
        redis_port: int | str | None = 6379,
        redis_db: int | str | None = 0,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_url: str | None = None,
        redis_socket_timeout: float | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        """
        Raises:
            DataStoreError: if the server does not answer the initial PING.
        """
        if redis_client is None:
            redis_client = self._connect(
                host=redis_host,
                port=redis_port,
                db=redis_db,
                username=redis_username,
                password=redis_password,
                url=redis_url,
                socket_timeout=redis_socket_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    @staticmethod
    def _connect(*, host, port, db, username, password, url, socket_timeout) -> redis.Redis:
        # LinkRedisDAO parses hash fields as str
        if url:
            return redis.Redis.from_url(url, decode_responses=True, socket_timeout=socket_timeout)
        return redis.Redis(
            host=host,
            port=int(port),
            db=int(db),
            username=username,
            password=password,
            socket_timeout=socket_timeout,
            decode_responses=True,
        )

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server; False (or DataStoreError when raise_error) if unreachable"""
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {describe_connection(self.redis)}. Check the backend settings in AppConfig."
            ) from e
        return True

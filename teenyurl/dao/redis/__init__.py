from teenyurl.dao.redis.redis_key_schema import RedisKeySchema
from teenyurl.dao.redis.mixins import RedisClientMixin
from teenyurl.dao.redis.link_redis_dao import LinkRedisDAO


__all__ = [
    'RedisKeySchema',
    'LinkRedisDAO',
    'RedisClientMixin',
]

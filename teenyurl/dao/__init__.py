from teenyurl.dao.base import LinkBaseDAO
from teenyurl.dao.memory import LinkMemoryDAO
from teenyurl.dao.redis import LinkRedisDAO
from teenyurl.dao.factory import link_dao_from_config


__all__ = [
    'LinkBaseDAO',
    'LinkMemoryDAO',
    'LinkRedisDAO',
    'link_dao_from_config',
]

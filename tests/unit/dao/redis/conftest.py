"""Shared fixtures for Redis DAO tests

`redis_client` is a single mock that stands in for the client, its pipelines
and their context managers, so commands issued inside `with
self.redis.pipeline() as pipe:` are asserted directly on `redis_client`.
"""

from unittest.mock import MagicMock

import pytest
import redis


REDIS_TARGET = {'host': 'redis.test', 'port': 6379, 'db': 0}


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def redis_client() -> MagicMock:
    client = MagicMock(spec=redis.client.Pipeline)
    client.connection_pool = MagicMock(spec=redis.ConnectionPool, connection_kwargs=dict(REDIS_TARGET))
    client.ping.return_value = True

    # pipeline() and `with` both hand back the same mock
    client.pipeline.return_value = client
    client.__enter__.return_value = client
    client.__exit__.return_value = None
    return client

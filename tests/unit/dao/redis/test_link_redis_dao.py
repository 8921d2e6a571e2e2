"""Unit tests for the LinkRedisDAO

Test coverage includes:

1. Insertion behavior
   - Ensures put() stores the hash, indexes the id and points the shortcode claim at it.
   - Ensures put_if_absent() claims the shortcode with SET NX before writing.
   - Confirms claimed shortcodes raise LinkAlreadyExistsError.
   - Ensures invalid types raise BeartypeCallHintParamViolation.
   - Confirms Redis connection errors raise DataStoreError.
   - Ensures a failed write after a won claim releases the shortcode.

2. Update and removal
   - Ensures update() sets, deletes and re-claims fields.
   - Ensures remove() deletes the hash, de-indexes and releases the claim it owns.

3. Retrieval behavior
   - Ensures get_all() reads every indexed hash in id order.
   - Ensures find_by('shortcode') follows the claim key.

4. Counter operations
   - Ensures increment() runs EXISTS + HINCRBY as one server-side script.
   - Ensures links removed before the increment are not recreated.
   - Ensures negative amounts raise ValueError.
"""

from dataclasses import replace
from unittest.mock import call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from teenyurl.models import LinkModel
from teenyurl.dao.exceptions import DataStoreError, LinkAlreadyExistsError, LinkNotFoundError
from teenyurl.dao.redis import LinkRedisDAO
from teenyurl.dao.redis.link_redis_dao import INCREMENT_IF_EXISTS


LINK_MAPPING = {
    'original_url': 'https://example.com/page',
    'shortcode': 'aB3x',
    'created_at': '1760000000000',
    'clicks': '4',
    'custom_code': '0',
}


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def link():
    return LinkModel(original_url='https://example.com/page', shortcode='aB3x', created_at=1760000000000)


@pytest.fixture
def dao(redis_client, app_prefix):
    return LinkRedisDAO(redis_client=redis_client, prefix=app_prefix)


# -------------------------------
# 1. Insertion behavior
# -------------------------------


def test_put(dao, redis_client, link):
    """Ensure put() writes hash, index and claim in one transaction."""
    redis_client.incr.return_value = 7

    link_id = dao.put(link)

    assert link_id == '7'
    redis_client.incr.assert_called_once_with('testapp:test:links:counter')
    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.hset.assert_called_once_with(
        'testapp:test:links:7',
        mapping={
            'original_url': 'https://example.com/page',
            'shortcode': 'aB3x',
            'created_at': 1760000000000,
            'clicks': 0,
            'custom_code': 0,
        },
    )
    redis_client.sadd.assert_called_once_with('testapp:test:links:index', '7')
    redis_client.set.assert_called_once_with('testapp:test:shortcodes:aB3x', '7')
    redis_client.execute.assert_called_once()


def test_put_with_explicit_id(dao, redis_client, link):
    assert dao.put(replace(link, id='abc')) == 'abc'
    redis_client.incr.assert_not_called()


def test_put_if_absent(dao, redis_client, link):
    """Ensure put_if_absent() claims the code atomically before writing the hash."""
    redis_client.incr.return_value = 1
    redis_client.set.return_value = True

    link_id = dao.put_if_absent(link)

    assert link_id == '1'
    redis_client.set.assert_called_once_with('testapp:test:shortcodes:aB3x', '1', nx=True)
    redis_client.hset.assert_called_once()
    redis_client.sadd.assert_called_once_with('testapp:test:links:index', '1')


def test_put_if_absent_with_claimed_shortcode(dao, redis_client, link):
    """Ensure a lost SET NX raises LinkAlreadyExistsError and writes nothing."""
    redis_client.incr.return_value = 2
    redis_client.set.return_value = None

    with pytest.raises(LinkAlreadyExistsError, match="Link with code 'aB3x' already exists."):
        dao.put_if_absent(link)

    redis_client.hset.assert_not_called()
    redis_client.sadd.assert_not_called()


def test_put_with_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.put('https://example.com/notamodel')


def test_put_with_redis_connection_error(dao, redis_client, link):
    """Ensure Redis connection errors during insert raise DataStoreError."""
    redis_client.incr.side_effect = redis.exceptions.ConnectionError('Connection error')
    redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.put(link)


def test_put_if_absent_releases_claim_when_pipeline_fails(dao, redis_client, link):
    """Ensure a connection lost after SET NX leaves no claim behind."""
    redis_client.incr.return_value = 1
    redis_client.set.return_value = True
    redis_client.get.return_value = '1'
    redis_client.pipeline.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        dao.put_if_absent(link)

    redis_client.set.assert_called_once_with('testapp:test:shortcodes:aB3x', '1', nx=True)
    redis_client.get.assert_called_once_with('testapp:test:shortcodes:aB3x')
    redis_client.delete.assert_called_once_with('testapp:test:shortcodes:aB3x')


def test_put_if_absent_releases_claim_when_write_is_rejected(dao, redis_client, link):
    """Ensure a rejected transaction releases the claim and propagates the error."""
    redis_client.incr.return_value = 1
    redis_client.set.return_value = True
    redis_client.get.return_value = '1'
    redis_client.execute.side_effect = redis.exceptions.ResponseError('WRONGTYPE')

    with pytest.raises(redis.exceptions.ResponseError):
        dao.put_if_absent(link)

    redis_client.delete.assert_called_once_with('testapp:test:shortcodes:aB3x')


def test_put_if_absent_keeps_claim_taken_over_by_other_link(dao, redis_client, link):
    redis_client.incr.return_value = 1
    redis_client.set.return_value = True
    redis_client.get.return_value = '9'
    redis_client.execute.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError):
        dao.put_if_absent(link)

    redis_client.delete.assert_not_called()


# -------------------------------
# 2. Update and removal
# -------------------------------


def test_update(dao, redis_client):
    redis_client.hget.return_value = 'aB3x'

    assert dao.update('1', original_url='https://example.org', custom_code=True, expires_at=None) is True

    redis_client.hget.assert_called_once_with('testapp:test:links:1', 'shortcode')
    redis_client.hset.assert_called_once_with('testapp:test:links:1', mapping={'original_url': 'https://example.org', 'custom_code': 1})
    redis_client.hdel.assert_called_once_with('testapp:test:links:1', 'expires_at')
    redis_client.set.assert_not_called()


def test_update_moves_shortcode_claim(dao, redis_client):
    redis_client.hget.return_value = 'aB3x'
    redis_client.get.return_value = '1'

    assert dao.update('1', shortcode='new1') is True

    redis_client.set.assert_called_once_with('testapp:test:shortcodes:new1', '1')
    redis_client.delete.assert_called_once_with('testapp:test:shortcodes:aB3x')


def test_update_missing_link(dao, redis_client):
    redis_client.hget.return_value = None

    assert dao.update('1', clicks=3) is False
    redis_client.pipeline.assert_not_called()


def test_update_with_invalid_field(dao):
    with pytest.raises(ValueError, match='Link identifiers are immutable.'):
        dao.update('1', id='2')


def test_remove(dao, redis_client):
    redis_client.hget.return_value = 'aB3x'
    redis_client.execute.return_value = [1, 1]
    redis_client.get.return_value = '1'

    assert dao.remove('1') is True

    redis_client.srem.assert_called_once_with('testapp:test:links:index', '1')
    redis_client.delete.assert_has_calls([call('testapp:test:links:1'), call('testapp:test:shortcodes:aB3x')])


def test_remove_keeps_claim_owned_by_other_link(dao, redis_client):
    redis_client.hget.return_value = 'aB3x'
    redis_client.execute.return_value = [1, 1]
    redis_client.get.return_value = '9'

    assert dao.remove('1') is True
    redis_client.delete.assert_called_once_with('testapp:test:links:1')


def test_remove_missing_link(dao, redis_client):
    redis_client.hget.return_value = None
    redis_client.execute.return_value = [0, 0]

    assert dao.remove('1') is False
    redis_client.get.assert_not_called()


# -------------------------------
# 3. Retrieval behavior
# -------------------------------


def test_get_all(dao, redis_client):
    redis_client.smembers.return_value = {'2', '1', '3'}
    redis_client.execute.return_value = [LINK_MAPPING, {**LINK_MAPPING, 'shortcode': 'zzzz'}, {}]

    links = dao.get_all()

    redis_client.pipeline.assert_called_once_with(transaction=False)
    redis_client.hgetall.assert_has_calls([call('testapp:test:links:1'), call('testapp:test:links:2'), call('testapp:test:links:3')])
    assert [(link.id, link.shortcode, link.clicks) for link in links] == [('1', 'aB3x', 4), ('2', 'zzzz', 4)]


def test_get_all_empty(dao, redis_client):
    redis_client.smembers.return_value = set()

    assert dao.get_all() == []
    redis_client.pipeline.assert_not_called()


def test_find_by_shortcode(dao, redis_client):
    redis_client.get.return_value = '1'
    redis_client.hgetall.return_value = LINK_MAPPING

    [link] = dao.find_by('shortcode', 'aB3x')

    redis_client.get.assert_called_once_with('testapp:test:shortcodes:aB3x')
    redis_client.hgetall.assert_called_once_with('testapp:test:links:1')
    assert link.id == '1'
    assert link.original_url == 'https://example.com/page'
    assert link.created_at == 1760000000000


def test_find_by_unclaimed_shortcode(dao, redis_client):
    redis_client.get.return_value = None

    assert dao.find_by('shortcode', 'none') == []
    redis_client.hgetall.assert_not_called()


def test_find_by_claim_without_hash(dao, redis_client):
    redis_client.get.return_value = '1'
    redis_client.hgetall.return_value = {}

    assert dao.find_by('shortcode', 'aB3x') == []


def test_find_by_other_field_scans(dao, redis_client):
    redis_client.smembers.return_value = {'1', '2'}
    redis_client.execute.return_value = [LINK_MAPPING, {**LINK_MAPPING, 'shortcode': 'zzzz', 'custom_code': '1'}]

    [link] = dao.find_by('custom_code', True)
    assert link.shortcode == 'zzzz'


def test_find_by_unknown_field(dao):
    with pytest.raises(ValueError, match="Unknown link field 'target'."):
        dao.find_by('target', 'x')


# -------------------------------
# 4. Counter operations
# -------------------------------


def test_increment(dao, redis_client):
    """Ensure increment() checks existence and increments in one script call."""
    redis_client.eval.return_value = 5

    assert dao.increment('1') == 5
    redis_client.eval.assert_called_once_with(INCREMENT_IF_EXISTS, 1, 'testapp:test:links:1', 'clicks', 1)
    redis_client.hincrby.assert_not_called()
    redis_client.exists.assert_not_called()


def test_increment_by_amount(dao, redis_client):
    redis_client.eval.return_value = 9

    assert dao.increment('1', 'clicks', 4) == 9
    redis_client.eval.assert_called_once_with(INCREMENT_IF_EXISTS, 1, 'testapp:test:links:1', 'clicks', 4)


def test_increment_missing_link(dao, redis_client):
    """Ensure a link removed before the increment raises and is not recreated."""
    redis_client.eval.return_value = None

    with pytest.raises(LinkNotFoundError, match="Link with id '1' not found."):
        dao.increment('1')
    redis_client.hincrby.assert_not_called()
    redis_client.hset.assert_not_called()


def test_increment_negative_amount(dao, redis_client):
    with pytest.raises(ValueError, match=r'Counters only increase \(given amount: -5\)\.'):
        dao.increment('1', 'clicks', -5)
    redis_client.eval.assert_not_called()


def test_increment_with_redis_timeout(dao, redis_client):
    redis_client.eval.side_effect = redis.exceptions.TimeoutError('Timeout')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        dao.increment('1')

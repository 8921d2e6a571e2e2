"""Unit tests for the LinkMemoryDAO

Test coverage includes:

1. Insertion behavior
   - put() assigns identifiers and keeps explicit ones.
   - put_if_absent() refuses claimed shortcodes, also under concurrent callers.
   - Invalid types raise BeartypeCallHintParamViolation.

2. Update and removal
   - update() merges fields and moves shortcode claims.
   - remove() is idempotent.

3. Queries
   - get_all() and find_by() return stored links.
   - Unknown fields raise ValueError.

4. Counter operations
   - increment() is atomic and raises LinkNotFoundError for unknown links.
   - Negative amounts raise ValueError and leave the counter untouched.
"""

import threading
from dataclasses import replace

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from teenyurl.models import LinkModel
from teenyurl.dao.memory import LinkMemoryDAO
from teenyurl.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def link():
    return LinkModel(original_url='https://example.com/page', shortcode='aB3x', created_at=1760000000000)


@pytest.fixture
def dao():
    return LinkMemoryDAO()


# -------------------------------
# 1. Insertion behavior
# -------------------------------


def test_put_assigns_identifier(dao, link):
    link_id = dao.put(link)

    assert isinstance(link_id, str) and link_id
    [stored] = dao.get_all()
    assert stored.id == link_id
    assert stored.original_url == link.original_url


def test_put_keeps_explicit_identifier(dao, link):
    assert dao.put(replace(link, id='42')) == '42'
    assert dao.find_by('id', '42')[0].shortcode == 'aB3x'


def test_put_assigns_distinct_identifiers(dao, link):
    ids = {dao.put(replace(link, shortcode=f'c{i}')) for i in range(10)}
    assert len(ids) == 10


def test_initialize_with_links(link):
    dao = LinkMemoryDAO([link, replace(link, shortcode='zzzz')])
    assert {stored.shortcode for stored in dao.get_all()} == {'aB3x', 'zzzz'}


def test_put_if_absent(dao, link):
    link_id = dao.put_if_absent(link)
    assert dao.find_by('shortcode', 'aB3x')[0].id == link_id


def test_put_if_absent_with_claimed_shortcode(dao, link):
    dao.put_if_absent(link)
    with pytest.raises(LinkAlreadyExistsError, match="Link with code 'aB3x' already exists."):
        dao.put_if_absent(replace(link, original_url='https://example.org'))

    [stored] = dao.get_all()
    assert stored.original_url == 'https://example.com/page'


def test_put_if_absent_is_atomic(dao, link):
    """Of many concurrent callers claiming one shortcode exactly one wins."""
    barrier = threading.Barrier(16)
    results = []

    def claim(i):
        barrier.wait()
        try:
            dao.put_if_absent(replace(link, original_url=f'https://example.com/{i}'))
            results.append('won')
        except LinkAlreadyExistsError:
            results.append('lost')

    threads = [threading.Thread(target=claim, args=(i,)) for i in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count('won') == 1
    assert len(dao.get_all()) == 1


def test_put_with_invalid_type(dao):
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.put('https://example.com/notamodel')


# -------------------------------
# 2. Update and removal
# -------------------------------


def test_update(dao, link):
    link_id = dao.put(link)

    assert dao.update(link_id, original_url='https://example.org', expires_at=5) is True

    [stored] = dao.get_all()
    assert stored.original_url == 'https://example.org'
    assert stored.expires_at == 5
    assert stored.shortcode == 'aB3x'


def test_update_moves_shortcode_claim(dao, link):
    link_id = dao.put_if_absent(link)

    dao.update(link_id, shortcode='new1')

    assert dao.find_by('shortcode', 'aB3x') == []
    assert dao.find_by('shortcode', 'new1')[0].id == link_id
    # The old code is free again
    dao.put_if_absent(link)


def test_update_missing_link(dao):
    assert dao.update('missing', clicks=3) is False


@pytest.mark.parametrize('fields', [{'id': 'other'}, {'unknown': 1}])
def test_update_with_invalid_fields(dao, link, fields):
    link_id = dao.put(link)
    with pytest.raises(ValueError):
        dao.update(link_id, **fields)


def test_remove(dao, link):
    link_id = dao.put_if_absent(link)

    assert dao.remove(link_id) is True
    assert dao.get_all() == []
    assert dao.find_by('shortcode', 'aB3x') == []
    # The code can be claimed again
    dao.put_if_absent(link)


def test_remove_is_idempotent(dao, link):
    link_id = dao.put(link)
    assert dao.remove(link_id) is True
    assert dao.remove(link_id) is False
    assert dao.remove('never-existed') is False


# -------------------------------
# 3. Queries
# -------------------------------


def test_get_all_empty(dao):
    assert dao.get_all() == []


def test_find_by(dao, link):
    dao.put(link)
    dao.put(replace(link, shortcode='zzzz', custom_code=True))

    assert [stored.shortcode for stored in dao.find_by('custom_code', True)] == ['zzzz']
    assert len(dao.find_by('original_url', 'https://example.com/page')) == 2
    assert dao.find_by('shortcode', 'none') == []


def test_find_by_unknown_field(dao):
    with pytest.raises(ValueError, match="Unknown link field 'target'."):
        dao.find_by('target', 'x')


# -------------------------------
# 4. Counter operations
# -------------------------------


def test_increment(dao, link):
    link_id = dao.put(link)

    assert dao.increment(link_id) == 1
    assert dao.increment(link_id, 'clicks', 5) == 6
    assert dao.get_all()[0].clicks == 6


def test_increment_is_atomic(dao, link):
    link_id = dao.put(link)

    def click():
        for _ in range(250):
            dao.increment(link_id)

    threads = [threading.Thread(target=click) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert dao.get_all()[0].clicks == 2000


def test_increment_missing_link(dao):
    with pytest.raises(LinkNotFoundError, match="Link with id 'missing' not found."):
        dao.increment('missing')


def test_increment_non_counter_field(dao, link):
    link_id = dao.put(link)
    with pytest.raises(ValueError, match="Field 'created_at' is not a counter."):
        dao.increment(link_id, 'created_at')


def test_increment_negative_amount(dao, link):
    link_id = dao.put(replace(link, clicks=2))

    with pytest.raises(ValueError, match=r'Counters only increase \(given amount: -5\)\.'):
        dao.increment(link_id, 'clicks', -5)

    assert dao.find_by('shortcode', link.shortcode)[0].clicks == 2

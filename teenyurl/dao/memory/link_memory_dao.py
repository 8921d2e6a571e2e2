"""In-process Data Access Object (DAO) for links

Keeps LinkModel instances in a dictionary guarded by a re-entrant lock, so
put_if_absent() and increment() are atomic for all threads of one process.
Intended for local development, single-process deployments and tests.

Example:
    >>> dao = LinkMemoryDAO()
    >>> link_id = dao.put_if_absent(LinkModel(original_url='https://example.com', shortcode='aB3x', created_at=0))
    >>> dao.put_if_absent(LinkModel(original_url='https://example.org', shortcode='aB3x', created_at=0))
    Traceback (most recent call last):
        ...
    teenyurl.dao.exceptions.LinkAlreadyExistsError: Link with code 'aB3x' already exists.
"""

import threading
import uuid
from dataclasses import replace
from typing import Any

from beartype import beartype

from teenyurl.models import LinkModel
from teenyurl.dao.base import LinkBaseDAO
from teenyurl.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


class LinkMemoryDAO(LinkBaseDAO):
    """Dictionary-backed LinkBaseDAO implementation.

    Attributes:
        _links (dict[str, LinkModel]):
            Stored links by identifier.
        _shortcodes (dict[str, str]):
            Claimed shortcodes mapped to the identifier of the claiming link.
    """

    def __init__(self, links: list[LinkModel] | None = None):
        self._lock = threading.RLock()
        self._links: dict[str, LinkModel] = {}
        self._shortcodes: dict[str, str] = {}
        for link in links or []:
            self.put(link)

    @beartype
    def put(self, link: LinkModel) -> str:
        with self._lock:
            link_id = link.id or uuid.uuid4().hex
            self._links[link_id] = replace(link, id=link_id)
            self._shortcodes[link.shortcode] = link_id
            return link_id

    @beartype
    def put_if_absent(self, link: LinkModel) -> str:
        with self._lock:
            if link.shortcode in self._shortcodes:
                raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")
            return self.put(link)

    @beartype
    def update(self, link_id: str, **fields: Any) -> bool:
        self._check_update_fields(fields)
        with self._lock:
            link = self._links.get(link_id)
            if link is None:
                return False
            self._links[link_id] = replace(link, **fields)
            if 'shortcode' in fields:
                self._reindex(link.shortcode)
                self._shortcodes.setdefault(fields['shortcode'], link_id)
            return True

    @beartype
    def remove(self, link_id: str) -> bool:
        with self._lock:
            link = self._links.pop(link_id, None)
            if link is None:
                return False
            self._reindex(link.shortcode)
            return True

    def get_all(self) -> list[LinkModel]:
        with self._lock:
            return list(self._links.values())

    @beartype
    def find_by(self, field: str, value: Any) -> list[LinkModel]:
        self._check_field(field)
        with self._lock:
            return [link for link in self._links.values() if getattr(link, field) == value]

    @beartype
    def increment(self, link_id: str, field: str = 'clicks', amount: int = 1) -> int:
        self._check_counter_field(field)
        self._check_increment_amount(amount)
        with self._lock:
            link = self._links.get(link_id)
            if link is None:
                raise LinkNotFoundError(f"Link with id '{link_id}' not found.")
            value = getattr(link, field) + amount
            self._links[link_id] = replace(link, **{field: value})
            return value

    def _reindex(self, shortcode: str) -> None:
        """Point a shortcode claim at a remaining link using it, or release it."""
        holder = next((link.id for link in self._links.values() if link.shortcode == shortcode), None)
        if holder is None:
            self._shortcodes.pop(shortcode, None)
        else:
            self._shortcodes[shortcode] = holder

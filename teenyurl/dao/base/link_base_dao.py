"""Abstract base class for Link data access objects (DAOs).

This class establishes a consistent contract for all Link DAO implementations,
regardless of the underlying storage mechanism (e.g., in-process memory, Redis).

Responsibilities:
    - Provide an interface for inserting, updating, removing and querying LinkModel objects.
    - Provide an atomic "claim shortcode" insertion (put_if_absent) and an
      atomic counter increment, so callers never read-modify-write.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from teenyurl.models import LinkModel
        >>> from teenyurl.dao import LinkMemoryDAO

        >>> dao = LinkMemoryDAO()

        >>> link = LinkModel(
        ...     original_url='https://example.com/blog/article-123',
        ...     shortcode='aB3x',
        ...     created_at=1760000000000,
        ... )
        >>> link_id = dao.put_if_absent(link)

        >>> [found] = dao.find_by('shortcode', 'aB3x')
        >>> found.original_url
        'https://example.com/blog/article-123'

        >>> dao.increment(link_id, 'clicks')
        1
"""

from abc import ABC, abstractmethod
from dataclasses import fields
from typing import Any

from teenyurl.models import LinkModel
from teenyurl.dao.exceptions import LinkAlreadyExistsError


LINK_FIELDS = frozenset(f.name for f in fields(LinkModel))
COUNTER_FIELDS = frozenset({'clicks'})


class LinkBaseDAO(ABC):
    """Interface for Link data access objects (DAOs).

    Methods:
        put(link: LinkModel) -> str:
            Insert a new LinkModel and return its assigned identifier.

        put_if_absent(link: LinkModel) -> str:
            Insert a new LinkModel only if its shortcode is not claimed yet.
            Raises LinkAlreadyExistsError otherwise.

        update(link_id: str, **fields) -> bool:
            Merge fields into an existing LinkModel.

        remove(link_id: str) -> bool:
            Delete a LinkModel by identifier.

        get_all() -> list[LinkModel]:
            Return every stored LinkModel.

        find_by(field: str, value: Any) -> list[LinkModel]:
            Return all LinkModels whose field equals value.

        increment(link_id: str, field: str = 'clicks', amount: int = 1) -> int:
            Atomically increment a counter field and return its new value.
            Raises LinkNotFoundError if the link does not exist.

    Every method raises DataStoreError on connection or I/O failure.

    Subclassing:
        Datastore-specific implementations must implement all abstract methods.
        Stores able to claim a key atomically should override put_if_absent().
    """

    @abstractmethod
    def put(self, link: LinkModel) -> str:
        """Insert a new LinkModel into the data store.

        Args:
            link (LinkModel):
                The LinkModel instance to be inserted. Its `id` is ignored.

        Returns:
            str: identifier assigned to the stored link.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    def put_if_absent(self, link: LinkModel) -> str:
        """Insert a new LinkModel unless its shortcode is already claimed.

        NOTE: This default implementation is check-then-write and therefore NOT
              atomic: two concurrent callers may both pass the check and insert
              the same shortcode. Data stores able to claim a key atomically
              override this method.

        Returns:
            str: identifier assigned to the stored link.

        Raises:
            LinkAlreadyExistsError:
                If a link with the same shortcode already exists.
            DataStoreError:
                If there is an error in the data store.
        """
        if self.find_by('shortcode', link.shortcode):
            raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")
        return self.put(link)

    @abstractmethod
    def update(self, link_id: str, **fields: Any) -> bool:
        """Merge fields into an existing LinkModel.

        Returns:
            bool: True if the link was found and updated, False otherwise.

        Raises:
            ValueError:
                If a field is not a LinkModel field (or is `id`).
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def remove(self, link_id: str) -> bool:
        """Delete a LinkModel by identifier.

        Returns:
            bool: True if a link existed and was deleted, False otherwise.
        """
        pass

    @abstractmethod
    def get_all(self) -> list[LinkModel]:
        pass

    @abstractmethod
    def find_by(self, field: str, value: Any) -> list[LinkModel]:
        """Return all links whose `field` equals `value`.

        Raises:
            ValueError:
                If `field` is not a LinkModel field.
        """
        pass

    @abstractmethod
    def increment(self, link_id: str, field: str = 'clicks', amount: int = 1) -> int:
        """Atomically increment a counter field.

        Returns:
            int: the new counter value.

        Raises:
            LinkNotFoundError:
                If no link with the given identifier exists.
            ValueError:
                If `field` is not a counter field or `amount` is negative.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @staticmethod
    def _check_field(field: str) -> None:
        if field not in LINK_FIELDS:
            raise ValueError(f"Unknown link field '{field}'.")

    @staticmethod
    def _check_update_fields(fields: dict[str, Any]) -> None:
        for field in fields:
            LinkBaseDAO._check_field(field)
            if field == 'id':
                raise ValueError('Link identifiers are immutable.')

    @staticmethod
    def _check_counter_field(field: str) -> None:
        if field not in COUNTER_FIELDS:
            raise ValueError(f"Field '{field}' is not a counter.")

    @staticmethod
    def _check_increment_amount(amount: int) -> None:
        # counters never go below zero
        if amount < 0:
            raise ValueError(f'Counters only increase (given amount: {amount}).')

"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a LinkModel is not found in the data store.

    LinkExpiredError:
        Raised when a LinkModel was found but has expired (and was evicted).

    LinkAlreadyExistsError:
        Raised when attempting to claim a shortcode that is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, time, OOM, etc.).

Example:
    >>> from teenyurl.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with code 'aB3x' not found.")
    Traceback (most recent call last):
        ...
    teenyurl.dao.exceptions.LinkNotFoundError: Link with code 'aB3x' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class LinkNotFoundError(DAOError):
    """Exception raised when a LinkModel is not found in the data store."""

    pass


class LinkExpiredError(LinkNotFoundError):
    """Exception raised when a LinkModel exists but its expiry time has passed.

    Subclasses LinkNotFoundError: expired links are treated as absent unless
    the caller explicitly asks for the difference.
    """

    pass


class LinkAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a LinkModel whose shortcode is already claimed."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass

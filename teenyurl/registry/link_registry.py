"""Link registry: shortcode allocation and redirect resolution

The registry owns every stateful operation on links and talks to storage only
through an injected LinkBaseDAO.

Responsibilities:
    - Validate creation input before touching the data store;
    - Allocate shortcodes (custom or generated) by atomically claiming them,
      retrying generated codes on collision;
    - Resolve shortcodes, lazily evicting expired links;
    - Record clicks with an atomic increment, never blocking a redirect on
      a tracking failure;
    - Delete links, purge expired links, and list/search/sort links for dashboards.

Example:
    >>> from teenyurl.dao import LinkMemoryDAO
    >>> registry = LinkRegistry(LinkMemoryDAO())
    >>> link = registry.create('example.com/some/long/page')
    >>> link.original_url
    'https://example.com/some/long/page'
    >>> registry.track_click(link.shortcode).clicks
    1
    >>> registry.delete(link.id)
    True
"""

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from collections.abc import Iterable

from teenyurl.constants import Shortcode
from teenyurl.models import LinkModel
from teenyurl.dao.base import LinkBaseDAO
from teenyurl.dao.exceptions import DataStoreError, LinkAlreadyExistsError, LinkExpiredError, LinkNotFoundError
from teenyurl.exceptions import (
    CodeGenerationExhaustedError,
    CodeUnavailableError,
    InvalidCodeError,
    InvalidDomainError,
    InvalidURLError,
)
from teenyurl.types import EpochMillis
from teenyurl.utils.helpers import now_ms, get_short_url
from teenyurl.utils.shortener import generate_shortcode
from teenyurl.utils.validation import (
    is_valid_custom_code,
    is_valid_domain,
    is_valid_url,
    normalize_domain,
    normalize_url,
    strip_scheme,
)


logger = logging.getLogger(__name__)


class LinkOrder(StrEnum):
    NEWEST = 'newest'
    OLDEST = 'oldest'
    MOST_CLICKS = 'most-clicks'


@dataclass(frozen=True)
class LinkOverview:
    """Aggregate counters over all stored links."""

    total_links: int
    total_clicks: int
    average_clicks: float
    top_links: list[LinkModel] = field(default_factory=list)


class LinkRegistry:
    """Authoritative shortcode -> link mapping on top of a LinkBaseDAO.

    Args:
        dao (LinkBaseDAO):
            Data store holding the links.
        base_url (str, optional):
            Base for short URLs of links without a custom domain.
            Defaults to teenyurl.utils.helpers.base_url().
    """

    def __init__(self, dao: LinkBaseDAO, base_url: str | None = None):
        self.dao = dao
        self.base_url = base_url

    def create(
        self,
        original_url: str,
        *,
        custom_code: str | None = None,
        expires_at: EpochMillis | None = None,
        custom_domain: str | None = None,
    ) -> LinkModel:
        """Create a short link

        Input is fully validated before the data store is touched. A custom code
        is claimed once; a generated code is claimed up to Shortcode.MAX_ATTEMPTS
        times, switching to Shortcode.FALLBACK_LENGTH characters after more than
        Shortcode.FALLBACK_AFTER_ATTEMPTS collisions.

        Args:
            original_url (str):
                Destination URL. `https://` is prefixed when no http(s) scheme is given.
            custom_code (str, optional):
                User-chosen shortcode. Blank values count as not given.
            expires_at (int, optional):
                Absolute expiry time in epoch milliseconds. A past value yields a
                link which is already expired.
            custom_domain (str, optional):
                Domain the short URL is displayed under. Blank values count as not given.

        Returns:
            LinkModel: the stored link, including its assigned `id`.

        Raises:
            InvalidURLError, InvalidCodeError, InvalidDomainError:
                If an input fails validation (no data store call was made).
            CodeUnavailableError:
                If the custom code is already claimed.
            CodeGenerationExhaustedError:
                If every generated code collided.
            DataStoreError:
                If the data store fails.
        """
        url = normalize_url(original_url)
        if not is_valid_url(url):
            raise InvalidURLError(f"'{original_url}' is not a valid URL.")

        custom_code = (custom_code or '').strip() or None
        if custom_code is not None and not is_valid_custom_code(custom_code):
            raise InvalidCodeError(f"'{custom_code}' may only contain letters, digits, '-' and '_'.")

        custom_domain = (custom_domain or '').strip() or None
        if custom_domain is not None:
            if not is_valid_domain(strip_scheme(custom_domain).rstrip('/')):
                raise InvalidDomainError(f"'{custom_domain}' is not a valid domain name.")
            custom_domain = normalize_domain(custom_domain)

        link = LinkModel(
            original_url=url,
            shortcode=custom_code or '',
            created_at=now_ms(),
            expires_at=expires_at,
            custom_code=custom_code is not None,
            custom_domain=custom_domain,
        )

        if custom_code is not None:
            try:
                link_id = self.dao.put_if_absent(link)
            except LinkAlreadyExistsError as e:
                logger.info('Custom shortcode already in use.', extra={'shortcode': custom_code})
                raise CodeUnavailableError(f"Code '{custom_code}' is already in use.") from e
            link = replace(link, id=link_id)
        else:
            link = self._insert_with_generated_code(link)

        logger.info(
            'Created short link.',
            extra={'shortcode': link.shortcode, 'linkId': link.id, 'customCode': link.custom_code, 'expiresAt': link.expires_at},
        )
        return link

    def _insert_with_generated_code(self, link: LinkModel) -> LinkModel:
        for attempt in range(1, Shortcode.MAX_ATTEMPTS + 1):
            failures = attempt - 1
            length = Shortcode.FALLBACK_LENGTH if failures > Shortcode.FALLBACK_AFTER_ATTEMPTS else Shortcode.LENGTH
            candidate = replace(link, shortcode=generate_shortcode(length))
            try:
                link_id = self.dao.put_if_absent(candidate)
            except LinkAlreadyExistsError:
                logger.debug('Generated shortcode collided.', extra={'shortcode': candidate.shortcode, 'attempt': attempt})
                continue
            return replace(candidate, id=link_id)

        logger.warning('Shortcode generation exhausted.', extra={'attempts': Shortcode.MAX_ATTEMPTS})
        raise CodeGenerationExhaustedError(f'Failed to generate a unique code after {Shortcode.MAX_ATTEMPTS} attempts.')

    def is_code_available(self, code: str) -> bool:
        """Advisory check for forms; create() claims the code atomically regardless."""
        return not self.dao.find_by('shortcode', code)

    def resolve(self, shortcode: str) -> LinkModel:
        """Look up a live link by shortcode

        An expired link is removed from the data store on discovery.

        Raises:
            LinkExpiredError:
                If the link existed but has expired (it is now deleted).
            LinkNotFoundError:
                If no link uses the shortcode.
        """
        matches = self.dao.find_by('shortcode', shortcode)
        if not matches:
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")

        link = matches[0]
        if link.is_expired():
            logger.info('Link has expired, removing it.', extra={'shortcode': shortcode, 'linkId': link.id})
            self.dao.remove(link.id)
            raise LinkExpiredError(f"Link with code '{shortcode}' has expired.")
        return link

    def track_click(self, shortcode: str) -> LinkModel:
        """Resolve a shortcode and count one click

        A failure to persist the click is logged and the link is returned with
        its previous click count.

        Raises:
            LinkExpiredError, LinkNotFoundError: see resolve().
        """
        link = self.resolve(shortcode)
        try:
            clicks = self.dao.increment(link.id, 'clicks', 1)
        except (DataStoreError, LinkNotFoundError):
            logger.warning('Failed to track click.', exc_info=True, extra={'shortcode': shortcode, 'linkId': link.id})
            return link
        return replace(link, clicks=clicks)

    def delete(self, link_id: str) -> bool:
        """Delete a link by id; False if there was nothing to delete."""
        deleted = self.dao.remove(link_id)
        logger.info('Deleted link.' if deleted else 'Link to delete not found.', extra={'linkId': link_id})
        return deleted

    def purge_expired(self) -> int:
        now = now_ms()
        purged = sum(self.dao.remove(link.id) for link in self.dao.get_all() if link.is_expired(now))
        logger.info('Purged expired links.', extra={'purged': purged})
        return purged

    def list_all(self) -> list[LinkModel]:
        return self.dao.get_all()

    def search(self, term: str, links: Iterable[LinkModel] | None = None) -> list[LinkModel]:
        """Case-insensitive substring match on original URL or shortcode"""
        links = self.list_all() if links is None else list(links)
        needle = term.strip().lower()
        if not needle:
            return links
        return [link for link in links if needle in link.original_url.lower() or needle in link.shortcode.lower()]

    def sort_by(self, order: LinkOrder | str, links: Iterable[LinkModel] | None = None) -> list[LinkModel]:
        """Sort links for display

        Raises:
            ValueError: If `order` is not one of 'newest', 'oldest', 'most-clicks'.
        """
        order = LinkOrder(order)
        links = self.list_all() if links is None else list(links)
        match order:
            case LinkOrder.NEWEST:
                return sorted(links, key=lambda link: link.created_at, reverse=True)
            case LinkOrder.OLDEST:
                return sorted(links, key=lambda link: link.created_at)
            case LinkOrder.MOST_CLICKS:
                return sorted(links, key=lambda link: link.clicks, reverse=True)

    def overview(self, top: int = 5) -> LinkOverview:
        links = self.list_all()
        total_clicks = sum(link.clicks for link in links)
        return LinkOverview(
            total_links=len(links),
            total_clicks=total_clicks,
            average_clicks=total_clicks / len(links) if links else 0.0,
            top_links=self.sort_by(LinkOrder.MOST_CLICKS, links)[:top],
        )

    def short_url(self, link: LinkModel) -> str:
        return get_short_url(link.shortcode, link.custom_domain, base=self.base_url)

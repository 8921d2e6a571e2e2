from dataclasses import dataclass

from teenyurl.types import EpochMillis
from teenyurl.utils.helpers import now_ms, get_short_url


@dataclass(frozen=True)
class LinkModel:
    """Represent a shortened URL mapping.

    Attributes:
        original_url (str):
            The original long URL that the shortcode redirects to.
        shortcode (str):
            The unique short identifier representing the shortened URL.
        created_at (int):
            Creation time in epoch milliseconds.
        clicks (int):
            Number of successful redirects through this link.
        expires_at (Optional[int]):
            Expiry time in epoch milliseconds, after which the link is inert.
            None means the link never expires.
        custom_code (bool):
            True if the shortcode was chosen by the user instead of generated.
        custom_domain (Optional[str]):
            Scheme-qualified domain used instead of the default base URL.
        id (Optional[str]):
            Opaque identifier assigned by the data store on insertion.

    Example:
        >>> link = LinkModel(
        ...     original_url='https://example.com/article/123',
        ...     shortcode='aB3x',
        ...     created_at=1760000000000,
        ... )
        >>> link.clicks
        0
        >>> link.is_expired()
        False
        >>> link.short_url('https://sho.rt')
        'https://sho.rt/r/aB3x'
    """

    original_url: str
    shortcode: str
    created_at: EpochMillis
    clicks: int = 0
    expires_at: EpochMillis | None = None
    custom_code: bool = False
    custom_domain: str | None = None
    id: str | None = None

    def is_expired(self, now: EpochMillis | None = None) -> bool:
        """True if the link has an expiry time which is not in the future."""
        if self.expires_at is None:
            return False
        return self.expires_at <= (now_ms() if now is None else now)

    def short_url(self, base: str | None = None) -> str:
        return get_short_url(self.shortcode, self.custom_domain, base=base)

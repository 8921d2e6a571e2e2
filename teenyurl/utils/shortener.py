"""Shortcode generation utility

This module provides a helper function for generating short random slugs
over the Base62 alphabet.

Functions:
    generate_shortcode(length=4):
        Generate a random shortcode suitable for use as a URL slug.

Example:
    >>> from teenyurl.utils import generate_shortcode
    >>> generate_shortcode()
    'q7Fe'
    >>> generate_shortcode(5)
    'Nr5bk'
"""

import random

from teenyurl.constants import Shortcode


ALPHABET = Shortcode.ALPHABET
BASE = len(ALPHABET)  # 26 uppercase + 26 lowercase + 10 digits


def generate_shortcode(length: int = Shortcode.LENGTH) -> str:
    """Generate a random Base62 shortcode.

    Every character is an independent uniform draw from [A-Za-z0-9], so a
    4-character code has 62**4 (~14.7M) possible values.

    Args:
        length (int, optional):
            Number of characters in the resulting code. Defaults to 4.

    Returns:
        str: A random alphanumeric shortcode of exactly `length` characters.

    NOTE:
        - This is not cryptographically secure and not collision free. Callers
          are expected to claim the code in the data store and retry on collision
          (see LinkRegistry.create()).
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(random.choices(ALPHABET, k=length))

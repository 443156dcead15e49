"""Shortcode generation primitives

Two ways of producing a Base62 shortcode are provided:

Functions:
    random_shortcode(length=8) -> str
        Draw a shortcode from a cryptographically secure random source.

    sequential_shortcode(counter, salt, length=8, mult=1315423911) -> str
        Map a monotonically increasing counter onto a fixed-length,
        non-sequential-looking shortcode (salted affine permutation).

Example:
    >>> from clickshortener.utils.shortener import random_shortcode, sequential_shortcode
    >>> len(random_shortcode())
    8
    >>> sequential_shortcode(12345, salt='my_secret') == sequential_shortcode(12345, salt='my_secret')
    True
"""

import math
import secrets
import string

import xxhash

from clickshortener.utils.constants import DEFAULT_SHORTCODE_LENGTH


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def random_shortcode(length: int = DEFAULT_SHORTCODE_LENGTH) -> str:
    """Generate a random Base62 shortcode

    Args:
        length (int, optional):
            Number of characters. Defaults to 8.

    Returns:
        str: shortcode drawn uniformly from the Base62 alphabet.

    NOTE:
        - Uniqueness is not checked here; the store's insert is the arbiter.
    """
    if length <= 0:
        raise ValueError(f'Shortcode length must be a positive integer (given value: {length}).')
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def sequential_shortcode(counter: int, salt: str, length: int = DEFAULT_SHORTCODE_LENGTH, mult: int = 1315423911) -> str:
    """Encode a counter into a fixed-length Base62 shortcode

    The counter is scrambled by a multiplicative permutation over the space
    BASE^length and shifted by an xxhash of the salt, then Base62 encoded:
    - 1:1 mapping (bijective) while `counter < BASE**length`
    - Deterministic output
    - No visible sequential patterns

    Args:
        counter (int):
            Unique non-negative integer, e.g. the store's allocation counter.
        salt (str):
            Secret string used to offset the output space.
        length (int, optional):
            Length of the resulting shortcode. Defaults to 8.
        mult (int, optional):
            Multiplicative factor for the permutation.
            Must be coprime with BASE**length.

    Returns:
        str: Base62 shortcode of exactly `length` characters.

    Raises:
        TypeError: counter is not an int or salt is not a str.
        ValueError: negative counter, empty salt or a non-coprime `mult`.
    """
    if not isinstance(counter, int):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt}).')

    modulo_space = BASE**length
    if math.gcd(mult, modulo_space) != 1:
        raise ValueError(f'Multiplicative factor must be coprime with mod ({modulo_space}) (given value: mult={mult}).')

    # NOTE: collisions only occur once the counter wraps around the modulo space
    salt_hash = xxhash.xxh64_intdigest(salt) % modulo_space
    permuted = (counter * mult + salt_hash) % modulo_space

    # Most significant digit first, padded with ALPHABET[0]
    return ''.join(reversed([ALPHABET[(permuted // BASE**i) % BASE] for i in range(length)])).rjust(length, ALPHABET[0])

"""Unit tests for shortcode generation primitives in shortener.py

Test coverage includes:

1. Random shortcodes
   - Fixed length, Base62 alphabet only.
   - 10,000 draws are pairwise distinct.
   - Non-positive lengths are rejected.

2. Sequential shortcodes
   - Deterministic for the same counter and salt.
   - Different salts and consecutive counters give different codes.
   - Bijective over a range of counters.
   - Invalid inputs raise TypeError/ValueError.
"""

import string

import pytest

from clickshortener.utils.shortener import ALPHABET, random_shortcode, sequential_shortcode


BASE62 = set(string.ascii_letters + string.digits)


# -------------------------------
# 1. Random shortcodes
# -------------------------------


def test_random_shortcode_length_and_alphabet():
    for _ in range(100):
        code = random_shortcode()
        assert len(code) == 8
        assert set(code) <= BASE62


def test_random_shortcode_custom_length():
    assert len(random_shortcode(12)) == 12


def test_random_shortcodes_are_distinct():
    codes = {random_shortcode() for _ in range(10_000)}
    assert len(codes) == 10_000


@pytest.mark.parametrize('length', [0, -3])
def test_random_shortcode_rejects_non_positive_length(length):
    with pytest.raises(ValueError):
        random_shortcode(length)


# -------------------------------
# 2. Sequential shortcodes
# -------------------------------


def test_alphabet_is_base62():
    assert len(ALPHABET) == 62
    assert set(ALPHABET) == BASE62


def test_sequential_shortcode_is_deterministic():
    assert sequential_shortcode(12345, salt='unit_test_salt') == sequential_shortcode(12345, salt='unit_test_salt')


def test_sequential_shortcode_depends_on_salt():
    assert sequential_shortcode(12345, salt='salt_a') != sequential_shortcode(12345, salt='salt_b')


def test_sequential_shortcode_length_and_alphabet():
    for counter in (0, 1, 62, 10**9, 62**8 + 5):
        code = sequential_shortcode(counter, salt='unit_test_salt')
        assert len(code) == 8
        assert set(code) <= BASE62


def test_sequential_shortcode_is_bijective_on_counter_range():
    codes = {sequential_shortcode(counter, salt='unit_test_salt', length=4) for counter in range(5_000)}
    assert len(codes) == 5_000


@pytest.mark.parametrize(
    'counter, salt, exception',
    [
        (-1, 'salt', ValueError),
        ('12', 'salt', TypeError),
        (None, 'salt', TypeError),
        (1, '', ValueError),
        (1, 42, TypeError),
    ],
)
def test_sequential_shortcode_rejects_invalid_input(counter, salt, exception):
    with pytest.raises(exception):
        sequential_shortcode(counter, salt=salt)


def test_sequential_shortcode_rejects_non_coprime_multiplier():
    with pytest.raises(ValueError, match='coprime'):
        sequential_shortcode(1, salt='salt', mult=62)

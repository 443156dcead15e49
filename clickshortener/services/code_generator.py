"""Short code allocation

A short code is either a caller-chosen custom alias (validated for format and
checked against the store) or generated by one of two strategies:

    random      8 random Base62 characters (default)
    sequential  the store's allocation counter passed through a salted
                Base62 permutation

Generated codes are not checked against the store: the store's atomic insert
is the authority on uniqueness (see UrlService.create).
"""

import re
import logging

from clickshortener.dao.base import UrlRecordBaseDAO
from clickshortener.dao.exceptions import DataStoreError, UrlRecordNotFoundError
from clickshortener.exceptions import AliasAlreadyInUseError, InvalidAliasFormatError, StoreReadError, StoreWriteError
from clickshortener.utils.shortener import random_shortcode, sequential_shortcode
from clickshortener.utils.constants import (
    DEFAULT_SHORTCODE_LENGTH,
    SHORTCODE_STRATEGY_RANDOM,
    SHORTCODE_STRATEGY_SEQUENTIAL,
)


logger = logging.getLogger(__name__)

ALIAS_PATTERN = re.compile(r'[A-Za-z0-9_-]+')


class CodeGenerator:
    def __init__(
        self,
        dao: UrlRecordBaseDAO,
        length: int = DEFAULT_SHORTCODE_LENGTH,
        strategy: str = SHORTCODE_STRATEGY_RANDOM,
        salt: str | None = None,
    ):
        if strategy not in (SHORTCODE_STRATEGY_RANDOM, SHORTCODE_STRATEGY_SEQUENTIAL):
            raise ValueError(f'Unknown shortcode strategy: {strategy!r}.')
        if strategy == SHORTCODE_STRATEGY_SEQUENTIAL and not salt:
            raise ValueError('The sequential shortcode strategy requires a non-empty salt.')

        self.dao = dao
        self.length = length
        self.strategy = strategy
        self.salt = salt

    def generate(self, custom_alias: str | None = None) -> str:
        """Return a short code for a new record

        Args:
            custom_alias (str | None):
                Caller-chosen code. If None, a code is generated.

        Returns:
            str: the alias unchanged, or a freshly generated code.

        Raises:
            InvalidAliasFormatError:
                The alias contains characters outside [A-Za-z0-9_-] or is empty.
            AliasAlreadyInUseError:
                A record with this alias exists.
            StoreReadError:
                The alias could not be checked against the store.
            StoreWriteError:
                The sequential counter could not be incremented.
        """
        if custom_alias is None:
            return self._generate()

        if not isinstance(custom_alias, str) or not ALIAS_PATTERN.fullmatch(custom_alias):
            raise InvalidAliasFormatError(
                f"Invalid custom alias '{custom_alias}': only letters, numbers, hyphens and underscores are allowed."
            )

        try:
            self.dao.find_by_code(custom_alias)
        except UrlRecordNotFoundError:
            return custom_alias
        except DataStoreError as e:
            raise StoreReadError(f"Can't check custom alias '{custom_alias}' against the store.") from e

        raise AliasAlreadyInUseError(f"Custom alias '{custom_alias}' is already in use.")

    def _generate(self) -> str:
        if self.strategy == SHORTCODE_STRATEGY_RANDOM:
            return random_shortcode(self.length)

        try:
            counter = self.dao.count(increment=True)
        except DataStoreError as e:
            raise StoreWriteError("Can't increment the shortcode allocation counter.") from e

        logger.debug('Allocated shortcode counter %s.', counter)
        return sequential_shortcode(counter, salt=self.salt, length=self.length)

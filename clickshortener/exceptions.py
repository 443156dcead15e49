"""Errors reported by the URL services to the HTTP layer.

Every error carries a stable `error_code`; the HTTP layer maps error classes
(or codes) to status codes. Store failures are retryable by the caller.

Hierarchy:
    ShortenerError
    ├── InvalidURLError
    ├── InvalidAliasFormatError
    ├── InvalidExpirationError
    ├── AliasAlreadyInUseError
    ├── UrlNotResolvableError
    │   ├── UrlNotFoundError
    │   └── UrlExpiredError
    ├── NotAuthorizedError
    └── StoreError
        ├── StoreReadError
        └── StoreWriteError
            └── ShortcodeConflictError
"""


class ShortenerError(Exception):
    error_code = 'SHORTENER_ERROR'


class InvalidURLError(ShortenerError):
    """The long URL is not an absolute http(s) URL."""

    error_code = 'INVALID_URL'


class InvalidAliasFormatError(ShortenerError):
    """The custom alias contains characters outside [A-Za-z0-9_-]."""

    error_code = 'INVALID_ALIAS_FORMAT'


class InvalidExpirationError(ShortenerError):
    """The expiration deadline is not a datetime."""

    error_code = 'INVALID_EXPIRATION'


class AliasAlreadyInUseError(ShortenerError):
    error_code = 'ALIAS_ALREADY_IN_USE'


class UrlNotResolvableError(ShortenerError):
    """The short code cannot be redirected."""

    error_code = 'URL_NOT_RESOLVABLE'


class UrlNotFoundError(UrlNotResolvableError):
    error_code = 'URL_NOT_FOUND'


class UrlExpiredError(UrlNotResolvableError):
    """The short URL existed but its deadline has passed."""

    error_code = 'URL_EXPIRED'


class NotAuthorizedError(ShortenerError):
    error_code = 'NOT_AUTHORIZED'


class StoreError(ShortenerError):
    error_code = 'STORE_ERROR'


class StoreReadError(StoreError):
    error_code = 'STORE_READ_ERROR'


class StoreWriteError(StoreError):
    error_code = 'STORE_WRITE_ERROR'


class ShortcodeConflictError(StoreWriteError):
    """The store rejected the insert as a duplicate code.

    The code was free when checked but was taken before the insert landed.
    """

    error_code = 'SHORTCODE_CONFLICT'

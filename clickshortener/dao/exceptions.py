"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    UrlRecordNotFoundError:
        Raised when a UrlRecordModel is not found in the data store.

    UrlRecordAlreadyExistsError:
        Raised when inserting a UrlRecordModel whose code is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from clickshortener.dao.exceptions import UrlRecordNotFoundError
    >>> raise UrlRecordNotFoundError("URL record with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    clickshortener.dao.exceptions.UrlRecordNotFoundError: URL record with code 'abc123' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class UrlRecordNotFoundError(DAOError):
    """Exception raised when a UrlRecordModel is not found in the data store."""

    pass


class UrlRecordAlreadyExistsError(DAOError):
    """Exception raised when inserting a UrlRecordModel whose code already exists in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass

"""Abstract base class for URL record data access objects (DAOs).

This class establishes a consistent contract for all URL record DAO
implementations, regardless of the underlying storage mechanism (e.g.,
Redis or process memory).

Responsibilities:
    - Insert, retrieve and delete UrlRecordModel objects keyed by short code.
    - Enforce short code uniqueness atomically on insert.
    - Record clicks as a single atomic increment-and-append.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from clickshortener.models import UrlRecordModel, ClickEventModel
        >>> from clickshortener.dao.memory import UrlRecordMemoryDAO

        >>> dao = UrlRecordMemoryDAO()
        >>> dao.insert(record)
        <UrlRecordMemoryDAO>

        >>> dao.record_click('abc123', ClickEventModel(timestamp=now)).click_count
        1
"""

from abc import ABC, abstractmethod

from clickshortener.models import ClickEventModel, UrlRecordModel


class UrlRecordBaseDAO(ABC):
    """Interface for URL record data access objects (DAOs).

    Methods:
        find_by_code(code: str, **kwargs) -> UrlRecordModel:
            Raises UrlRecordNotFoundError if the code does not exist.

        find_by_owner(owner_id: str, **kwargs) -> list[UrlRecordModel]:
            All records of an owner, newest first, without their click logs.

        insert(record: UrlRecordModel, **kwargs) -> UrlRecordBaseDAO:
            Raises UrlRecordAlreadyExistsError if the code is taken.

        record_click(code: str, event: ClickEventModel, **kwargs) -> UrlRecordModel:
            Atomically increment the click counter and append the event.
            Raises UrlRecordNotFoundError if the code does not exist.

        delete(code: str, **kwargs) -> UrlRecordBaseDAO:
            Raises UrlRecordNotFoundError if the code does not exist.

        mark_expired(code: str, **kwargs) -> UrlRecordBaseDAO:
            Persist the expiration flag.
            Raises UrlRecordNotFoundError if the code does not exist.

        count(increment: bool, **kwargs) -> int:
            Return (and optionally increment) the global allocation counter.

    All methods raise DataStoreError on connection or I/O failure.

    NOTE:
        - Expired records are kept (soft expiration). The DAO never deletes
          records on its own.
    """

    @abstractmethod
    def find_by_code(self, code: str, **kwargs) -> UrlRecordModel:
        """Retrieve a UrlRecordModel by its short code.

        Raises:
            UrlRecordNotFoundError:
                If no record with the given code exists.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_owner(self, owner_id: str, **kwargs) -> list[UrlRecordModel]:
        pass

    @abstractmethod
    def insert(self, record: UrlRecordModel, **kwargs) -> 'UrlRecordBaseDAO':
        """Insert a new UrlRecordModel into the data store.

        The uniqueness check and the write are one atomic operation: a
        duplicate code never overwrites the existing record.

        Returns:
            UrlRecordBaseDAO: self (for method chaining)

        Raises:
            UrlRecordAlreadyExistsError:
                If a record with the same code already exists.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def record_click(self, code: str, event: ClickEventModel, **kwargs) -> UrlRecordModel:
        """Atomically increment the click counter and append a click event.

        Returns:
            UrlRecordModel: the record as it is right after this click.

        Raises:
            UrlRecordNotFoundError:
                If no record with the given code exists.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, code: str, **kwargs) -> 'UrlRecordBaseDAO':
        pass

    @abstractmethod
    def mark_expired(self, code: str, **kwargs) -> 'UrlRecordBaseDAO':
        pass

    @abstractmethod
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve the current allocation counter value from the data store.

        Args:
            increment (bool):
                If True, increment the counter by 1 before returning the value.
        """
        pass

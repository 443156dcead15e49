"""URL lifecycle management

`UrlService` is the single entry point used by the HTTP layer. Each public
method serves one request and either returns a value or raises one of the
errors in clickshortener.exceptions; mapping errors to status codes is the
HTTP layer's job.

Request flows:
    create      CodeGenerator -> QR image -> store insert -> cache prime
    visit       resolve (cache, else store) -> ClickRecorder
    stats       store -> aggregate
    delete      store (ownership check) -> store delete -> cache invalidate

Example:
    >>> service = UrlService(dao=UrlRecordMemoryDAO(), cache=ResolutionCache(),
    ...                      generator=CodeGenerator(dao), base_url='https://sho.rt')
    >>> record = service.create('https://example.com/page', owner_id='user-1')
    >>> service.visit(record.code, user_agent='Mozilla/5.0 Chrome/126.0').click_count
    1
    >>> service.stats(record.code).browser_stats
    {'Chrome': 1}
"""

import logging
from datetime import datetime
from collections.abc import Callable, Iterable

import validators

from clickshortener.cache import ResolutionCache
from clickshortener.dao.base import UrlRecordBaseDAO
from clickshortener.dao.exceptions import DataStoreError, UrlRecordAlreadyExistsError, UrlRecordNotFoundError
from clickshortener.exceptions import (
    InvalidExpirationError,
    InvalidURLError,
    NotAuthorizedError,
    ShortcodeConflictError,
    ShortenerError,
    StoreReadError,
    StoreWriteError,
    UrlExpiredError,
    UrlNotFoundError,
)
from clickshortener.models import (
    BulkItem,
    BulkOutcome,
    ClickEventModel,
    StatsModel,
    UrlRecordModel,
    UrlSummaryModel,
)
from clickshortener.services.analytics import aggregate
from clickshortener.services.click_recorder import ClickRecorder
from clickshortener.services.code_generator import CodeGenerator
from clickshortener.utils.constants import DEFAULT_MAX_RETRIES
from clickshortener.utils.helpers import as_utc, get_short_url, utc_now
from clickshortener.utils.qr import encode_as_image


logger = logging.getLogger(__name__)

WEB_SCHEMES = ('http://', 'https://')


def is_web_url(value: object) -> bool:
    return isinstance(value, str) and value.lower().startswith(WEB_SCHEMES) and bool(validators.url(value))


class UrlService:
    """Create, resolve, track and delete short URLs.

    Args:
        dao (UrlRecordBaseDAO):
            Record store.
        cache (ResolutionCache):
            Resolution cache shared by all requests of this process.
        generator (CodeGenerator):
            Short code allocator.
        base_url (str):
            Public base URL prepended to codes to build short URLs.
        clock (Callable[[], datetime]):
            Source of the current UTC time.
        image_codec (Callable[[str], str]):
            Renders the short URL as an image payload (QR code).
        max_retries (int):
            Extra attempts with a fresh generated code when the store reports
            a duplicate. Custom aliases are never retried.
    """

    def __init__(
        self,
        dao: UrlRecordBaseDAO,
        cache: ResolutionCache,
        generator: CodeGenerator,
        base_url: str,
        clock: Callable[[], datetime] = utc_now,
        image_codec: Callable[[str], str] = encode_as_image,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        self.dao = dao
        self.cache = cache
        self.generator = generator
        self.base_url = base_url
        self.clock = clock
        self.image_codec = image_codec
        self.max_retries = max_retries
        self.recorder = ClickRecorder(dao, cache)

    # -------------------------------
    # Creation
    # -------------------------------

    def create(
        self,
        long_url: str,
        custom_alias: str | None = None,
        expires_at: datetime | None = None,
        *,
        owner_id: str,
    ) -> UrlRecordModel:
        """Shorten a URL

        Args:
            long_url (str):
                Absolute http(s) URL to shorten.
            custom_alias (str | None):
                Caller-chosen short code.
            expires_at (datetime | None):
                Deadline after which the short URL stops resolving. Naive
                datetimes are taken as UTC. None means the URL never expires.
            owner_id (str):
                Identifier of the creating principal.

        Returns:
            UrlRecordModel: the persisted record (click_count == 0).

        Raises:
            InvalidURLError, InvalidAliasFormatError, InvalidExpirationError,
            AliasAlreadyInUseError:
                Bad request.
            ShortcodeConflictError:
                The code was taken between the availability check and the insert.
            StoreReadError, StoreWriteError:
                The store failed.
        """
        if not is_web_url(long_url):
            raise InvalidURLError(f"Invalid URL '{long_url}': an absolute http(s) URL is required.")
        if expires_at is not None and not isinstance(expires_at, datetime):
            raise InvalidExpirationError(f"Invalid expiration '{expires_at}': a datetime is required.")

        expires_at = as_utc(expires_at)
        attempts = 1 if custom_alias is not None else 1 + self.max_retries

        for attempt in range(1, attempts + 1):
            code = self.generator.generate(custom_alias)
            record = self._build_record(code, long_url, expires_at, str(owner_id))
            lease = self.cache.lease(code)
            try:
                self.dao.insert(record)
            except UrlRecordAlreadyExistsError as e:
                if attempt < attempts:
                    logger.warning(
                        'Generated shortcode collided. Retrying with a new one.',
                        extra={'shortcode': code, 'attempt': attempt, 'event': 'SHORTCODE_COLLISION'},
                    )
                    continue
                raise ShortcodeConflictError(f"Short code '{code}' was taken concurrently. Retry the request.") from e
            except DataStoreError as e:
                raise StoreWriteError(f"Can't persist short URL '{code}'.") from e
            break

        self.cache.put(record, lease=lease)
        logger.info(
            'Short URL created.',
            extra={'shortcode': record.code, 'owner_id': record.owner_id, 'event': 'URL_CREATED'},
        )
        return record

    def _build_record(self, code: str, long_url: str, expires_at: datetime | None, owner_id: str) -> UrlRecordModel:
        short_url = get_short_url(self.base_url, code)
        return UrlRecordModel(
            code=code,
            long_url=long_url,
            short_url=short_url,
            owner_id=owner_id,
            created_at=self.clock(),
            expires_at=expires_at,
            qr_code=self.image_codec(short_url),
        )

    def create_bulk(self, items: Iterable[BulkItem], *, owner_id: str) -> list[BulkOutcome]:
        """Shorten many URLs independently

        Items are processed strictly in input order. A failing item does not
        stop the others; the result holds exactly one outcome per item, in
        input order. Unexpected errors (e.g. a failing image codec) are
        reported with the generic SHORTENER_ERROR code.
        """
        return [self._create_outcome(item, owner_id) for item in items]

    def _create_outcome(self, item: BulkItem, owner_id: str) -> BulkOutcome:
        try:
            record = self.create(item.long_url, item.custom_alias, item.expires_at, owner_id=owner_id)
        except ShortenerError as e:
            logger.info(
                'Bulk item rejected.',
                extra={'original_url': item.long_url, 'error_code': e.error_code, 'event': 'BULK_ITEM_FAILED'},
            )
            return BulkOutcome.failed(item.long_url, e, e.error_code)
        except Exception as e:
            logger.exception(
                'Bulk item failed unexpectedly.',
                extra={'original_url': str(item.long_url), 'event': 'BULK_ITEM_ERROR'},
            )
            return BulkOutcome.failed(item.long_url, e, ShortenerError.error_code)
        return BulkOutcome.ok(item.long_url, record)

    # -------------------------------
    # Resolution & tracking
    # -------------------------------

    def resolve(self, code: str) -> UrlRecordModel:
        """Look up a resolvable record

        Raises:
            UrlNotFoundError:
                No record exists for the code.
            UrlExpiredError:
                The record's deadline has passed. The expiration flag is
                persisted before the error is raised.
            StoreReadError:
                The store failed.
        """
        record = self.cache.get(code)
        if record is not None:
            logger.debug('Resolved from cache.', extra={'shortcode': code, 'event': 'CACHE_HIT'})
            return record

        lease = self.cache.lease(code)
        record = self._find(code)
        if record.is_expired(self.clock()):
            self._expire(record)
            raise UrlExpiredError(f"Short URL '{record.short_url}' has expired.")

        self.cache.put(record, lease=lease)
        return record

    def _find(self, code: str) -> UrlRecordModel:
        try:
            return self.dao.find_by_code(code)
        except UrlRecordNotFoundError as e:
            raise UrlNotFoundError(f"No short URL with code '{code}'.") from e
        except DataStoreError as e:
            raise StoreReadError(f"Can't read short URL '{code}'.") from e

    def _expire(self, record: UrlRecordModel) -> None:
        self.cache.invalidate(record.code)
        if record.expired:
            return

        # Expiration is decided from (record, now); the flag only records it
        try:
            self.dao.mark_expired(record.code)
        except (UrlRecordNotFoundError, DataStoreError):
            logger.warning(
                "Can't persist expiration flag.",
                extra={'shortcode': record.code, 'event': 'MARK_EXPIRED_FAILED'},
                exc_info=True,
            )
        else:
            logger.info('Short URL expired.', extra={'shortcode': record.code, 'event': 'URL_EXPIRED'})

    def visit(
        self,
        code: str,
        source_ip: str | None = None,
        user_agent: str | None = None,
        referer: str | None = None,
    ) -> UrlRecordModel:
        """Resolve a short code for a redirect and record the click

        Returns:
            UrlRecordModel: the record including this click; redirect to `long_url`.

        Raises:
            UrlNotFoundError:
                No record, or the record was deleted between lookup and click.
            UrlExpiredError:
                The record's deadline has passed.
            StoreReadError, StoreWriteError:
                The store failed.
        """
        self.resolve(code)

        event = ClickEventModel(timestamp=self.clock(), source_ip=source_ip, user_agent=user_agent, referer=referer)
        record = self.recorder.record(code, event)
        if record is None:
            raise UrlNotFoundError(f"No short URL with code '{code}'.")
        return record

    def qr_code(self, code: str) -> str:
        return self.resolve(code).qr_code

    # -------------------------------
    # Analytics, listing & deletion
    # -------------------------------

    def stats(self, code: str) -> StatsModel:
        """Aggregate click analytics of a record (expired records included)"""
        return aggregate(self._find(code), self.clock())

    def list_for_owner(self, owner_id: str) -> list[UrlSummaryModel]:
        try:
            records = self.dao.find_by_owner(str(owner_id))
        except DataStoreError as e:
            raise StoreReadError(f"Can't list short URLs of owner '{owner_id}'.") from e

        records = sorted(records, key=lambda record: record.created_at, reverse=True)
        return [UrlSummaryModel.from_record(record) for record in records]

    def delete(self, code: str, requester_id: str) -> UrlRecordModel:
        """Delete a record on behalf of its owner

        Owner ids are compared as strings, since callers may pass ids in
        other representations (e.g. ints or ObjectId-like values).

        Raises:
            UrlNotFoundError:
                No record exists for the code.
            NotAuthorizedError:
                The requester does not own the record.
            StoreReadError, StoreWriteError:
                The store failed.
        """
        record = self._find(code)
        if str(record.owner_id) != str(requester_id):
            logger.info(
                'Delete refused: requester does not own the short URL.',
                extra={'shortcode': code, 'requester_id': str(requester_id), 'event': 'DELETE_NOT_AUTHORIZED'},
            )
            raise NotAuthorizedError(f"Not authorized to delete short URL '{code}'.")

        try:
            self.dao.delete(code)
        except UrlRecordNotFoundError as e:
            self.cache.invalidate(code)
            raise UrlNotFoundError(f"No short URL with code '{code}'.") from e
        except DataStoreError as e:
            raise StoreWriteError(f"Can't delete short URL '{code}'.") from e

        self.cache.invalidate(code)
        logger.info('Short URL deleted.', extra={'shortcode': code, 'event': 'URL_DELETED'})
        return record

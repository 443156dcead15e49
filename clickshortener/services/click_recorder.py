import logging

from clickshortener.cache import ResolutionCache
from clickshortener.dao.base import UrlRecordBaseDAO
from clickshortener.dao.exceptions import DataStoreError, UrlRecordNotFoundError
from clickshortener.exceptions import StoreWriteError
from clickshortener.models import ClickEventModel, UrlRecordModel


logger = logging.getLogger(__name__)


class ClickRecorder:
    """Record visits to short URLs.

    The store performs the increment-and-append atomically; the recorder then
    refreshes the cached record with the state the store confirmed. Codes that
    are not cached (e.g. deleted concurrently) are left out of the cache.
    """

    def __init__(self, dao: UrlRecordBaseDAO, cache: ResolutionCache):
        self.dao = dao
        self.cache = cache

    def record(self, code: str, event: ClickEventModel) -> UrlRecordModel | None:
        """Record one click event

        Returns:
            UrlRecordModel | None:
                The updated record, or None if the record no longer exists.

        Raises:
            StoreWriteError:
                If the store could not record the click.
        """
        try:
            record = self.dao.record_click(code, event)
        except UrlRecordNotFoundError:
            logger.info(
                'Click on a record that no longer exists.',
                extra={'shortcode': code, 'event': 'CLICK_MISS'},
            )
            self.cache.invalidate(code)
            return None
        except DataStoreError as e:
            raise StoreWriteError(f"Can't record click for short code '{code}'.") from e

        self.cache.refresh(record)
        logger.debug('Recorded click #%s.', record.click_count, extra={'shortcode': code, 'event': 'CLICK_RECORDED'})
        return record

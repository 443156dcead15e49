from clickshortener.models.url_record_model import ClickEventModel, UrlRecordModel, UrlSummaryModel
from clickshortener.models.stats_model import StatsModel
from clickshortener.models.bulk_model import BulkItem, BulkOutcome


__all__ = [
    'ClickEventModel',
    'UrlRecordModel',
    'UrlSummaryModel',
    'StatsModel',
    'BulkItem',
    'BulkOutcome',
]

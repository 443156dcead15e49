"""Unit tests for the UrlRecordMemoryDAO

Test coverage includes:

1. Insert & lookup
   - Inserted records are found by code; unknown codes raise UrlRecordNotFoundError.
   - Duplicate codes raise UrlRecordAlreadyExistsError and keep the original.
   - Invalid argument types raise BeartypeCallHintParamViolation.

2. Owner listing
   - Only the owner's records, newest first.
   - Listed records keep their click count but carry no click log.

3. Click recording
   - Increments the counter and appends the event.
   - 100 concurrent clicks are all counted.
   - Unknown codes raise UrlRecordNotFoundError.

4. Deletion, expiration flag & counter
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from clickshortener.dao.memory import UrlRecordMemoryDAO
from clickshortener.dao.exceptions import UrlRecordAlreadyExistsError, UrlRecordNotFoundError


@pytest.fixture
def dao():
    return UrlRecordMemoryDAO()


# -------------------------------
# 1. Insert & lookup
# -------------------------------


def test_insert_and_find(dao, make_record):
    record = make_record()
    assert dao.insert(record) is dao
    assert dao.find_by_code('abc123') == record
    assert len(dao) == 1


def test_find_unknown_code(dao):
    with pytest.raises(UrlRecordNotFoundError, match="URL record with code 'missing' not found."):
        dao.find_by_code('missing')


def test_insert_duplicate_keeps_original(dao, make_record):
    original = make_record(long_url='https://example.com/original')
    dao.insert(original)

    with pytest.raises(UrlRecordAlreadyExistsError, match="URL record with code 'abc123' already exists."):
        dao.insert(make_record(long_url='https://example.com/intruder'))

    assert dao.find_by_code('abc123') == original


def test_concurrent_inserts_of_same_code_succeed_once(dao, make_record):
    start = threading.Barrier(20)
    outcomes = []

    def insert(i):
        start.wait()
        try:
            dao.insert(make_record(long_url=f'https://example.com/{i}'))
        except UrlRecordAlreadyExistsError:
            outcomes.append(False)
        else:
            outcomes.append(True)

    with ThreadPoolExecutor(max_workers=20) as pool:
        list(pool.map(insert, range(20)))

    assert outcomes.count(True) == 1


def test_invalid_argument_types(dao):
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.find_by_code(12345)
    with pytest.raises(BeartypeCallHintParamViolation):
        dao.insert('https://example.com/notamodel')


# -------------------------------
# 2. Owner listing
# -------------------------------


def test_find_by_owner_newest_first(dao, make_record, now):
    dao.insert(make_record(code='old', created_at=now - timedelta(days=2)))
    dao.insert(make_record(code='new', created_at=now))
    dao.insert(make_record(code='mid', created_at=now - timedelta(days=1)))
    dao.insert(make_record(code='other', owner_id='user-2'))

    assert [record.code for record in dao.find_by_owner('user-1')] == ['new', 'mid', 'old']
    assert dao.find_by_owner('nobody') == []


def test_find_by_owner_omits_click_logs(dao, make_record, make_click):
    dao.insert(make_record())
    dao.record_click('abc123', make_click())
    dao.record_click('abc123', make_click())

    [listed] = dao.find_by_owner('user-1')

    assert listed.click_count == 2
    assert listed.click_log == ()
    assert len(dao.find_by_code('abc123').click_log) == 2


# -------------------------------
# 3. Click recording
# -------------------------------


def test_record_click(dao, make_record, make_click):
    dao.insert(make_record())
    event = make_click()

    updated = dao.record_click('abc123', event)

    assert updated.click_count == 1
    assert updated.click_log == (event,)
    assert dao.find_by_code('abc123') == updated


def test_record_click_concurrently(dao, make_record, make_click):
    dao.insert(make_record())

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda _: dao.record_click('abc123', make_click()), range(100)))

    record = dao.find_by_code('abc123')
    assert record.click_count == 100
    assert len(record.click_log) == 100


def test_record_click_unknown_code(dao, make_click):
    with pytest.raises(UrlRecordNotFoundError):
        dao.record_click('missing', make_click())


# -------------------------------
# 4. Deletion, expiration flag & counter
# -------------------------------


def test_delete(dao, make_record):
    dao.insert(make_record())
    assert dao.delete('abc123') is dao
    with pytest.raises(UrlRecordNotFoundError):
        dao.find_by_code('abc123')
    with pytest.raises(UrlRecordNotFoundError):
        dao.delete('abc123')


def test_mark_expired(dao, make_record):
    dao.insert(make_record())
    dao.mark_expired('abc123')
    assert dao.find_by_code('abc123').expired is True

    with pytest.raises(UrlRecordNotFoundError):
        dao.mark_expired('missing')


def test_count(dao):
    assert dao.count() == 0
    assert dao.count(increment=True) == 1
    assert dao.count(increment=True) == 2
    assert dao.count() == 2

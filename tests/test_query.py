from datetime import datetime, timedelta, timezone

import pytest

from hbaserpc.call import Call, OptionError, apply_options
from hbaserpc.query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    QueryCall,
    cache_blocks,
    families,
    filters,
    max_results_per_column_family,
    max_versions,
    result_offset,
    time_range,
    time_range_uint64,
)


class _Query(QueryCall):
    def name(self):
        return "Query"

    def to_proto(self):
        return None

    def new_response(self):
        return None


class _Plain(Call):
    def name(self):
        return "Plain"

    def to_proto(self):
        return None

    def new_response(self):
        return None


class _Filter:
    def __init__(self, label):
        self.label = label

    def to_proto(self):
        return {"filter": self.label}


class _BrokenFilter:
    def to_proto(self):
        raise ValueError("cannot build filter")


def _query(*options):
    q = _Query(b"table", b"key")
    apply_options(q, *options)
    return q


def _plain_error(option):
    with pytest.raises(OptionError) as exc:
        apply_options(_Plain(), option)
    return str(exc.value)


def test_defaults():
    q = _query()
    assert q.families is None
    assert q.filter is None
    assert q.from_timestamp == MIN_TIMESTAMP
    assert q.to_timestamp == MAX_TIMESTAMP
    assert q.max_versions == DEFAULT_MAX_VERSIONS
    assert q.store_limit == DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY
    assert q.store_offset == 0
    assert q.cache_blocks is DEFAULT_CACHE_BLOCKS is True


def test_str_table_and_key_become_bytes():
    q = _Query("t", "k")
    apply_options(q, max_versions(2))
    assert (q.table, q.key, q.max_versions) == (b"t", b"k", 2)


def test_families_option():
    f = {"yolo": ["swag", "meow"]}
    assert _query(families(f)).families == f
    assert _plain_error(families(f)) == (
        "'Families' option can only be used with Get or Scan request"
    )


def test_filters_option():
    assert _query(filters(_Filter("count"))).filter == {"filter": "count"}
    assert _plain_error(filters(_Filter("count"))) == (
        "'Filters' option can only be used with Get or Scan request"
    )


def test_filters_option_propagates_conversion_error():
    with pytest.raises(ValueError, match="cannot build filter"):
        _query(filters(_BrokenFilter()))


def test_time_range_option():
    start = datetime(2017, 5, 15, 18, 31, 21, 120000, tzinfo=timezone.utc)
    end = start + timedelta(minutes=1)
    q = _query(time_range(start, end))
    assert q.from_timestamp == 1494873081120
    assert q.to_timestamp == 1494873141120
    assert _plain_error(time_range(end, start)) == (
        "'TimeRange' option can only be used with Get or Scan request"
    )


@pytest.mark.parametrize("minutes", [0, -1])
def test_time_range_rejects_empty_interval(minutes):
    start = datetime(2017, 5, 15, 18, 31, 21, tzinfo=timezone.utc)
    end = start + timedelta(minutes=minutes)
    with pytest.raises(OptionError) as exc:
        _query(time_range(start, end))
    assert str(exc.value) == "'from' timestamp is greater or equal to 'to' timestamp"


def test_time_range_uint64_accepts_full_range():
    q = _query(time_range_uint64(MIN_TIMESTAMP, MAX_TIMESTAMP))
    assert (q.from_timestamp, q.to_timestamp) == (0, 2**64 - 1)


def test_max_versions():
    assert _query(max_versions(123456)).max_versions == 123456
    with pytest.raises(OptionError) as exc:
        _query(max_versions(2**32 - 1))
    assert str(exc.value) == "'MaxVersions' exceeds supported number of versions"
    assert _plain_error(max_versions(123456)) == (
        "'MaxVersions' option can only be used with Get or Scan request"
    )


def test_max_results_per_column_family():
    assert _query(max_results_per_column_family(123456)).store_limit == 123456
    with pytest.raises(OptionError) as exc:
        _query(max_results_per_column_family(2**32 - 1))
    assert str(exc.value) == (
        "'MaxResultsPerColumnFamily' exceeds supported number of value results"
    )
    assert _plain_error(max_results_per_column_family(123456)) == (
        "'MaxResultsPerColumnFamily' option can only be used with Get or Scan request"
    )


def test_result_offset():
    assert _query(result_offset(123456)).store_offset == 123456
    with pytest.raises(OptionError) as exc:
        _query(result_offset(2**32 - 1))
    assert str(exc.value) == "'ResultOffset' exceeds supported offset value"
    assert _plain_error(result_offset(123456)) == (
        "'ResultOffset' option can only be used with Get or Scan request"
    )


def test_cache_blocks():
    assert _query(cache_blocks(False)).cache_blocks is False
    assert _query(cache_blocks(True)).cache_blocks is True
    assert _plain_error(cache_blocks(True)) == (
        "'CacheBlocks' option can only be used with Get or Scan request"
    )


def test_options_recorded_on_call():
    opt = max_versions(3)
    q = _query(opt)
    assert q.options == [opt]
"""Options and defaults shared by Get and Scan requests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Union

from .call import Call, Option, OptionError

MAX_INT32 = 2**31 - 1
MAX_UINT64 = 2**64 - 1

DEFAULT_MAX_VERSIONS = 1
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = MAX_UINT64
# Bytes fetched per scanner round trip; 2MB suits 1GbE networks.
DEFAULT_MAX_RESULT_SIZE = 2097152
DEFAULT_NUMBER_OF_ROWS = MAX_INT32
DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY = MAX_INT32
DEFAULT_CACHE_BLOCKS = True

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _as_bytes(value: Union[str, bytes, bytearray, None]) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _to_millis(moment: datetime) -> int:
    """Milliseconds since the epoch, truncated toward zero, as an unsigned 64-bit value."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    micros = (moment - _EPOCH) // timedelta(microseconds=1)
    millis = abs(micros) // 1000
    if micros < 0:
        millis = -millis
    return millis & MAX_UINT64


class QueryCall(Call):
    """A call that reads cells and accepts family, filter and range constraints."""

    def __init__(self, table: Any = b"", key: Any = b"") -> None:
        super().__init__(_as_bytes(table), _as_bytes(key))
        self.families: Optional[Dict[str, List[str]]] = None
        self.filter: Any = None
        self.from_timestamp = MIN_TIMESTAMP
        self.to_timestamp = MAX_TIMESTAMP
        self.max_versions = DEFAULT_MAX_VERSIONS
        self.store_limit = DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY
        self.store_offset = 0
        self.cache_blocks = DEFAULT_CACHE_BLOCKS


def _require_query(call: Call, option_name: str) -> QueryCall:
    if not isinstance(call, QueryCall):
        raise OptionError(
            f"'{option_name}' option can only be used with Get or Scan request"
        )
    return call


def families(mapping: Dict[str, List[str]]) -> Option:
    """Restrict a Get or Scan to the given families and qualifiers."""

    def apply(call: Call) -> None:
        _require_query(call, "Families").families = mapping

    return apply


def filters(filter_: Any) -> Option:
    """Attach a filter to a Get or Scan.

    A filter offering ``to_proto()`` is converted with it; any other object
    is used as the filter message itself.
    """

    def apply(call: Call) -> None:
        query = _require_query(call, "Filters")
        convert = getattr(filter_, "to_proto", None)
        query.filter = convert() if callable(convert) else filter_

    return apply


def time_range(start: datetime, end: datetime) -> Option:
    """Limit cells to timestamps in [start, end), at millisecond resolution."""
    return time_range_uint64(_to_millis(start), _to_millis(end))


def time_range_uint64(start: int, end: int) -> Option:
    """Limit cells to timestamps in [start, end), both in milliseconds."""

    def apply(call: Call) -> None:
        query = _require_query(call, "TimeRange")
        if start >= end:
            # 'end' is exclusive, so an equal bound is empty too.
            raise OptionError("'from' timestamp is greater or equal to 'to' timestamp")
        query.from_timestamp = start
        query.to_timestamp = end

    return apply


def max_versions(versions: int) -> Option:
    """Return at most this many versions of each cell."""

    def apply(call: Call) -> None:
        query = _require_query(call, "MaxVersions")
        if versions > MAX_INT32:
            raise OptionError("'MaxVersions' exceeds supported number of versions")
        query.max_versions = versions

    return apply


def max_results_per_column_family(max_results: int) -> Option:
    """Return at most this many cells per column family in a row."""

    def apply(call: Call) -> None:
        query = _require_query(call, "MaxResultsPerColumnFamily")
        if max_results > MAX_INT32:
            raise OptionError(
                "'MaxResultsPerColumnFamily' exceeds supported number of value results"
            )
        query.store_limit = max_results

    return apply


def result_offset(offset: int) -> Option:
    """Skip this many cells within each column family."""

    def apply(call: Call) -> None:
        query = _require_query(call, "ResultOffset")
        if offset > MAX_INT32:
            raise OptionError("'ResultOffset' exceeds supported offset value")
        query.store_offset = offset

    return apply


def cache_blocks(enabled: bool) -> Option:
    """Enable or disable the block cache for the request."""

    def apply(call: Call) -> None:
        _require_query(call, "CacheBlocks").cache_blocks = enabled

    return apply
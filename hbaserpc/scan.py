"""Scan request: read rows sequentially from a table."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .call import Call, CellBlockError, Option, OptionError, apply_options
from .call import deserialize_cell_blocks as _decode_cells
from .get import families_to_columns
from .messages import ResultMessage, ScanMessage, ScanRequest, ScanResponse, TimeRange
from .query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULT_SIZE,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    DEFAULT_NUMBER_OF_ROWS,
    MAX_TIMESTAMP,
    MAX_UINT64,
    MIN_TIMESTAMP,
    QueryCall,
    _as_bytes,
)

_ESCAPES = {
    0x07: "\\a",
    0x08: "\\b",
    0x0C: "\\f",
    0x0A: "\\n",
    0x0D: "\\r",
    0x09: "\\t",
    0x0B: "\\v",
    0x22: '\\"',
    0x5C: "\\\\",
}


def _quote(data: Optional[bytes]) -> str:
    parts = []
    for byte in data or b"":
        if byte in _ESCAPES:
            parts.append(_ESCAPES[byte])
        elif 0x20 <= byte < 0x7F:
            parts.append(chr(byte))
        else:
            parts.append(f"\\x{byte:02x}")
    return '"' + "".join(parts) + '"'


def _format_families(families: Optional[Dict[Any, List[Any]]]) -> str:
    items = sorted((families or {}).items())
    body = " ".join(f"{k}:[{' '.join(str(q) for q in v)}]" for k, v in items)
    return f"map[{body}]"


class Scan(QueryCall):
    """Scan a table, optionally over the half-open key range [start_row, stop_row)."""

    def __init__(
        self,
        table: Any,
        *args: Option,
        start_row: Any = None,
        stop_row: Any = None,
    ) -> None:
        super().__init__(table, b"")
        self.scanner_id = MAX_UINT64
        self.max_result_size = DEFAULT_MAX_RESULT_SIZE
        self.number_of_rows = DEFAULT_NUMBER_OF_ROWS
        self.reversed = False
        self.closing = False
        self.allow_partial_results = False
        self.start_row: Optional[bytes] = None
        self.stop_row: Optional[bytes] = None
        apply_options(self, *args)
        if start_row is not None or stop_row is not None:
            self.start_row = None if start_row is None else _as_bytes(start_row)
            self.stop_row = None if stop_row is None else _as_bytes(stop_row)
            self.key = self.start_row or b""

    def __str__(self) -> str:
        filter_text = "<nil>" if self.filter is None else str(self.filter)
        return (
            f"Scan{{Table={_quote(self.table)} StartRow={_quote(self.start_row)} "
            f"StopRow={_quote(self.stop_row)} "
            f"TimeRange=({self.from_timestamp}, {self.to_timestamp}) "
            f"MaxVersions={self.max_versions} NumberOfRows={self.number_of_rows} "
            f"MaxResultSize={self.max_result_size} "
            f"Familes={_format_families(self.families)} Filter={filter_text} "
            f"StoreLimit={self.store_limit} StoreOffset={self.store_offset} "
            f"ScannerID={self.scanner_id} Close={'true' if self.closing else 'false'}}}"
        )

    def name(self) -> str:
        return "Scan"

    def to_proto(self) -> ScanRequest:
        request = ScanRequest(
            region=self.region_specifier(),
            close_scanner=self.closing,
            number_of_rows=self.number_of_rows,
            # Partial rows are handled client side; heartbeats are ignored.
            client_handles_partials=True,
            client_handles_heartbeats=True,
        )
        if self.scanner_id != MAX_UINT64:
            request.scanner_id = self.scanner_id
            return request

        scan = ScanMessage(
            columns=families_to_columns(self.families),
            start_row=self.start_row,
            stop_row=self.stop_row,
            time_range=TimeRange(),
            max_result_size=self.max_result_size,
        )
        if self.max_versions != DEFAULT_MAX_VERSIONS:
            scan.max_versions = self.max_versions
        if self.store_limit != DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY:
            scan.store_limit = self.store_limit
        if self.store_offset != 0:
            scan.store_offset = self.store_offset
        if self.from_timestamp != MIN_TIMESTAMP:
            scan.time_range.from_ = self.from_timestamp
        if self.to_timestamp != MAX_TIMESTAMP:
            scan.time_range.to = self.to_timestamp
        if self.reversed:
            scan.reversed = True
        if self.cache_blocks != DEFAULT_CACHE_BLOCKS:
            scan.cache_blocks = self.cache_blocks
        scan.filter = self.filter
        request.scan = scan
        return request

    def new_response(self) -> ScanResponse:
        return ScanResponse()

    def deserialize_cell_blocks(self, response: ScanResponse, data: bytes) -> int:
        """Rebuild the response's results from cell blocks; return bytes read."""
        partials = response.partial_flag_per_result
        counts = response.cells_per_result
        if len(counts) > len(partials):
            raise CellBlockError(
                f"got {len(counts)} cell counts but {len(partials)} partial flags"
            )
        data = bytes(data)
        results: List[Optional[ResultMessage]] = [None] * len(partials)
        read = 0
        for index, (count, partial) in enumerate(zip(counts, partials)):
            cells, size = _decode_cells(data[read:], count)
            results[index] = ResultMessage(cells=cells, partial=partial)
            read += size
        response.results = results  # type: ignore[assignment]
        return read


def _require_scan(call: Call, option_name: str) -> Scan:
    if not isinstance(call, Scan):
        raise OptionError(f"'{option_name}' option can only be used with Scan queries")
    return call


def scanner_id(value: int) -> Option:
    """Continue an ongoing scan with the given scanner id."""

    def apply(call: Call) -> None:
        _require_scan(call, "ScannerID").scanner_id = value

    return apply


def close_scanner() -> Option:
    """Close the scanner once the first response is returned."""

    def apply(call: Call) -> None:
        _require_scan(call, "Close").closing = True

    return apply


def max_result_size(n: int) -> Option:
    """Cap the bytes fetched per round trip; takes priority over the row count."""

    def apply(call: Call) -> None:
        scan = _require_scan(call, "MaxResultSize")
        if n == 0:
            raise OptionError("'MaxResultSize' option must be greater than 0")
        scan.max_result_size = n

    return apply


def number_of_rows(n: int) -> Option:
    """Set how many rows are fetched per round trip."""

    def apply(call: Call) -> None:
        _require_scan(call, "NumberOfRows").number_of_rows = n

    return apply


def allow_partial_results() -> Option:
    """Let the scanner hand out partial rows."""

    def apply(call: Call) -> None:
        _require_scan(call, "AllowPartialResults").allow_partial_results = True

    return apply


def reversed_scan() -> Option:
    """Scan in reverse key order."""

    def apply(call: Call) -> None:
        _require_scan(call, "Reversed").reversed = True

    return apply
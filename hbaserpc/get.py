"""Get request: read a single row."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .call import Option, apply_options
from .call import deserialize_cell_blocks as _decode_cells
from .messages import Column, GetMessage, GetRequest, GetResponse, TimeRange
from .query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    QueryCall,
    _as_bytes,
)


def families_to_columns(families: Optional[Dict[Any, List[Any]]]) -> List[Column]:
    """Convert a family-to-qualifiers mapping into column messages."""
    if not families:
        return []
    return [
        Column(family=_as_bytes(family), qualifiers=[_as_bytes(q) for q in qualifiers])
        for family, qualifiers in families.items()
    ]


class Get(QueryCall):
    """Read one row of a table."""

    batchable = True

    def __init__(self, table: Any, key: Any, *args: Option) -> None:
        super().__init__(table, key)
        self._exists_only = False
        apply_options(self, *args)

    def name(self) -> str:
        return "Get"

    def exists_only(self) -> None:
        """Ask only whether the row exists, returning no cells."""
        self._exists_only = True

    def to_proto(self) -> GetRequest:
        get = GetMessage(
            row=self.key,
            columns=families_to_columns(self.families),
            time_range=TimeRange(),
        )
        if self.store_limit != DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY:
            get.store_limit = self.store_limit
        if self.store_offset != 0:
            get.store_offset = self.store_offset
        if self.max_versions != DEFAULT_MAX_VERSIONS:
            get.max_versions = self.max_versions
        if self.from_timestamp != MIN_TIMESTAMP:
            get.time_range.from_ = self.from_timestamp
        if self.to_timestamp != MAX_TIMESTAMP:
            get.time_range.to = self.to_timestamp
        if self._exists_only:
            get.existence_only = True
        if self.cache_blocks != DEFAULT_CACHE_BLOCKS:
            get.cache_blocks = self.cache_blocks
        get.filter = self.filter
        return GetRequest(region=self.region_specifier(), get=get)

    def new_response(self) -> GetResponse:
        return GetResponse()

    def deserialize_cell_blocks(self, response: GetResponse, data: bytes) -> int:
        """Append the cells carried in cell blocks to the response; return bytes read."""
        if response.result is None:
            return 0
        cells, read = _decode_cells(data, response.result.associated_cell_count or 0)
        response.result.cells.extend(cells)
        return read
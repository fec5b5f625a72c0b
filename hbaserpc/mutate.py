"""Mutation requests: put, delete, append and increment."""

from __future__ import annotations

import enum
import struct
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .call import Call, Option, OptionError, apply_options
from .call import deserialize_cell_blocks as _decode_cells
from .messages import (
    CellType,
    ColumnValue,
    DeleteType,
    MutateRequest,
    MutateResponse,
    MutationProto,
    MutationType,
    NameBytesPair,
    QualifierValue,
)
from .query import MAX_TIMESTAMP, MAX_UINT64, _as_bytes, _to_millis

ATTRIBUTE_NAME_TTL = "_ttl"
# HBase's LATEST_TIMESTAMP is Java's Long.MAX_VALUE.
_LATEST_TIMESTAMP = 2**63 - 1

Values = Optional[Mapping[Any, Optional[Mapping[Any, Optional[bytes]]]]]


class DurabilityType(enum.IntEnum):
    """Write-ahead-log durability of a mutation."""

    USE_DEFAULT = 0
    SKIP_WAL = 1
    ASYNC_WAL = 2
    SYNC_WAL = 3
    FSYNC_WAL = 4


def _require_mutate(call: Call, option_name: str) -> "Mutate":
    if not isinstance(call, Mutate):
        raise OptionError(
            f"'{option_name}' option can only be used with mutation queries"
        )
    return call


def ttl(duration: timedelta) -> Option:
    """Set a time-to-live on the mutation, at millisecond resolution."""

    def apply(call: Call) -> None:
        mutate = _require_mutate(call, "TTL")
        micros = duration // timedelta(microseconds=1)
        millis = abs(micros) // 1000
        if micros < 0:
            millis = -millis
        mutate.ttl = (millis & MAX_UINT64).to_bytes(8, "big")

    return apply


def timestamp(moment: datetime) -> Option:
    """Set the mutation's timestamp, rounded down to milliseconds."""

    def apply(call: Call) -> None:
        _require_mutate(call, "Timestamp").timestamp = _to_millis(moment)

    return apply


def timestamp_uint64(ts: int) -> Option:
    """Set the mutation's timestamp as a raw integer."""

    def apply(call: Call) -> None:
        _require_mutate(call, "TimestampUint64").timestamp = ts

    return apply


def durability(value: int) -> Option:
    """Set the durability of the mutation."""

    def apply(call: Call) -> None:
        mutate = _require_mutate(call, "Durability")
        if not DurabilityType.USE_DEFAULT <= value <= DurabilityType.FSYNC_WAL:
            raise OptionError("invalid durability value")
        mutate.durability = DurabilityType(value)

    return apply


def delete_one_version() -> Option:
    """Delete only one version of the given columns instead of all of them."""

    def apply(call: Call) -> None:
        _require_mutate(call, "DeleteOneVersion").delete_one_version = True

    return apply


def to_cellblock(
    row: bytes,
    family: bytes,
    qualifier: bytes,
    value: Optional[bytes],
    ts: int,
    kind: int,
) -> Tuple[List[bytes], int]:
    """Encode one key-value as cell block parts; return them with their total size."""
    value = value or b""
    key_length = 2 + len(row) + 1 + len(family) + len(qualifier) + 8 + 1
    kv_length = 8 + key_length + len(value)
    parts = [
        struct.pack(">IIIH", kv_length, key_length, len(value), len(row)),
        row,
        bytes([len(family)]),
        family,
        qualifier,
        struct.pack(">QB", ts, kind),
    ]
    if value:
        parts.append(value)
    return parts, 4 + kv_length


class Mutate(Call):
    """A mutation of one row."""

    batchable = True

    def __init__(
        self,
        table: Any,
        key: Any,
        values: Values,
        *args: Option,
        mutation_type: MutationType = MutationType.PUT,
    ) -> None:
        super().__init__(_as_bytes(table), _as_bytes(key))
        self.values = values
        self.mutation_type = mutation_type
        self.ttl = b""
        self.timestamp = MAX_TIMESTAMP
        self.durability = DurabilityType.USE_DEFAULT
        self.delete_one_version = False
        apply_options(self, *args)
        if mutation_type == MutationType.DELETE and not values and self.delete_one_version:
            raise OptionError(
                "'DeleteOneVersion' option cannot be specified for delete entire row request"
            )

    def name(self) -> str:
        return "Mutate"

    def _classify(
        self, qualifiers: Optional[Mapping[Any, Optional[bytes]]]
    ) -> Tuple[Optional[DeleteType], CellType, Mapping[Any, Optional[bytes]]]:
        if self.mutation_type != MutationType.DELETE:
            return None, CellType.PUT, qualifiers or {}
        if not qualifiers:
            # Delete the whole column family.
            if self.delete_one_version:
                kinds = (DeleteType.DELETE_FAMILY_VERSION, CellType.DELETE_FAMILY_VERSION)
            else:
                kinds = (DeleteType.DELETE_FAMILY, CellType.DELETE_FAMILY)
            if qualifiers is None:
                qualifiers = {"": None}
            return kinds[0], kinds[1], qualifiers
        if self.delete_one_version:
            return DeleteType.DELETE_ONE_VERSION, CellType.DELETE, qualifiers
        return DeleteType.DELETE_MULTIPLE_VERSIONS, CellType.DELETE_COLUMN, qualifiers

    def _values_to_proto(self, ts: Optional[int]) -> List[ColumnValue]:
        columns = []
        for family, qualifiers in (self.values or {}).items():
            delete_type, _, qualifiers = self._classify(qualifiers)
            columns.append(
                ColumnValue(
                    family=_as_bytes(family),
                    qualifier_values=[
                        QualifierValue(
                            qualifier=_as_bytes(qualifier),
                            value=value,
                            timestamp=ts,
                            delete_type=delete_type,
                        )
                        for qualifier, value in qualifiers.items()
                    ],
                )
            )
        return columns

    def _values_to_cellblocks(self) -> Tuple[List[bytes], int, int]:
        ts = _LATEST_TIMESTAMP if self.timestamp == MAX_TIMESTAMP else self.timestamp
        blocks: List[bytes] = []
        count = 0
        size = 0
        for family, qualifiers in (self.values or {}).items():
            _, kind, qualifiers = self._classify(qualifiers)
            family_bytes = _as_bytes(family)
            for qualifier, value in qualifiers.items():
                parts, part_size = to_cellblock(
                    self.key, family_bytes, _as_bytes(qualifier), value, ts, kind
                )
                blocks.extend(parts)
                size += part_size
                count += 1
        return blocks, count, size

    def _build(self, with_cellblocks: bool) -> Tuple[MutateRequest, List[bytes], int]:
        ts = None if self.timestamp == MAX_TIMESTAMP else self.timestamp
        mutation = MutationProto(
            row=self.key,
            mutate_type=self.mutation_type,
            durability=self.durability,
            timestamp=ts,
        )
        blocks: List[bytes] = []
        size = 0
        if with_cellblocks:
            # The cells travel after the message; only their count goes in it.
            blocks, count, size = self._values_to_cellblocks()
            mutation.associated_cell_count = count
        else:
            mutation.column_values = self._values_to_proto(ts)
        if self.ttl:
            mutation.attributes.append(NameBytesPair(name=ATTRIBUTE_NAME_TTL, value=self.ttl))
        request = MutateRequest(region=self.region_specifier(), mutation=mutation)
        return request, blocks, size

    def to_proto(self) -> MutateRequest:
        return self._build(False)[0]

    def new_response(self) -> MutateResponse:
        return MutateResponse()

    def deserialize_cell_blocks(self, response: MutateResponse, data: bytes) -> int:
        """Append the cells carried in cell blocks to the response; return bytes read."""
        if response.result is None:
            return 0
        cells, read = _decode_cells(data, response.result.associated_cell_count or 0)
        response.result.cells.extend(cells)
        return read

    def serialize_cell_blocks(self) -> Tuple[MutateRequest, List[bytes], int]:
        """Build the request with its cells as cell blocks: message, parts, total size."""
        return self._build(True)

    def cell_blocks_enabled(self) -> bool:
        return True


def new_put(table: Any, key: Any, values: Values, *args: Option) -> Mutate:
    """Insert the given family/qualifier values into a row."""
    return Mutate(table, key, values, *args, mutation_type=MutationType.PUT)


def new_del(table: Any, key: Any, values: Values, *args: Option) -> Mutate:
    """Delete a row, or the given families or qualifiers of it."""
    return Mutate(table, key, values, *args, mutation_type=MutationType.DELETE)


def new_app(table: Any, key: Any, values: Values, *args: Option) -> Mutate:
    """Append the given values to the existing cells of a row."""
    return Mutate(table, key, values, *args, mutation_type=MutationType.APPEND)


def new_inc(table: Any, key: Any, values: Values, *args: Option) -> Mutate:
    """Increment the given cells of a row."""
    return Mutate(table, key, values, *args, mutation_type=MutationType.INCREMENT)


def new_inc_single(
    table: Any, key: Any, family: str, qualifier: str, amount: int, *args: Option
) -> Mutate:
    """Increment a single cell by a signed 64-bit amount."""
    encoded = (amount & MAX_UINT64).to_bytes(8, "big")
    values: Dict[Any, Dict[Any, bytes]] = {family: {qualifier: encoded}}
    return new_inc(table, key, values, *args)
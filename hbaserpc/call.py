"""Base RPC call type, call options and cell block decoding."""

from __future__ import annotations

import abc
import queue
import struct
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, List, Optional, Protocol, Tuple

from .messages import (
    Cell,
    CellType,
    RegionSpecifier,
    RegionSpecifierType,
    ResultMessage,
)

_MASK32 = 0xFFFFFFFF


class OptionError(ValueError):
    """Raised when an option cannot be applied to a call."""


class CellBlockError(ValueError):
    """Raised when a cell block cannot be decoded."""


class _RegionInfo(Protocol):
    name: bytes


Option = Callable[["Call"], None]


@dataclass
class RPCResult:
    """The message returned by an RPC, or the error raised making it."""

    msg: Any = None
    error: Optional[BaseException] = None


def _fmt_bool(value: Optional[bool]) -> str:
    if value is None:
        return "<nil>"
    return "true" if value else "false"


@dataclass
class Result:
    """Cells of a row together with flags about the response."""

    cells: List[Cell] = field(default_factory=list)
    stale: bool = False
    partial: bool = False
    exists: Optional[bool] = None

    def __str__(self) -> str:
        return (
            f"cells:{self.cells} stale:{_fmt_bool(self.stale)} "
            f"partial:{_fmt_bool(self.partial)} exists:{_fmt_bool(self.exists)} "
        )


class Call(abc.ABC):
    """An HBase RPC call."""

    batchable: ClassVar[bool] = False

    def __init__(self, table: bytes = b"", key: bytes = b"") -> None:
        self.table = table
        self.key = key
        self.options: List[Option] = []
        self.region: Optional[_RegionInfo] = None
        self.skip_batch = False
        self.results: "queue.Queue[RPCResult]" = queue.Queue(maxsize=1)

    @abc.abstractmethod
    def name(self) -> str:
        """Name of the RPC method."""

    @abc.abstractmethod
    def to_proto(self) -> Any:
        """Build the request message."""

    @abc.abstractmethod
    def new_response(self) -> Any:
        """Create an empty response message."""

    def region_specifier(self) -> RegionSpecifier:
        """Name the region this call is routed to."""
        if self.region is None:
            raise ValueError("call has no region")
        return RegionSpecifier(
            type=RegionSpecifierType.REGION_NAME,
            value=bytes(self.region.name),
        )


def apply_options(call: Call, *args: Option) -> None:
    """Record the options on the call and apply each in turn."""
    call.options = list(args)
    for option in args:
        option(call)


def skip_batch() -> Option:
    """Option telling the client to send a Get or Mutate right away."""

    def apply(call: Call) -> None:
        if not call.batchable:
            raise OptionError("'SkipBatch' option only works with Get and Mutate requests")
        call.skip_batch = True

    return apply


def _require(data: bytes, needed: int) -> None:
    if len(data) < needed:
        raise CellBlockError(f"buffer is too small: expected {needed}, got {len(data)}")


def cell_from_cell_block(data: bytes) -> Tuple[Cell, int]:
    """Decode one cell; return it with the number of bytes it took."""
    data = bytes(data)
    _require(data, 4)
    kv_len = int.from_bytes(data[0:4], "big")
    _require(data, kv_len + 4)
    _require(data, 14)

    row_key_len, value_len, key_len = struct.unpack_from(">IIH", data, 4)
    pos = 14
    _require(data, pos + key_len + 1)
    key = data[pos:pos + key_len]
    pos += key_len

    family_len = data[pos]
    pos += 1
    _require(data, pos + family_len)
    family = data[pos:pos + family_len]
    pos += family_len

    qualifier_len = (row_key_len - key_len - family_len - 2 - 1 - 8 - 1) & _MASK32
    total = (4 + 4 + 2 + key_len + 1 + family_len + qualifier_len + 8 + 1 + value_len) & _MASK32
    if total != kv_len:
        raise CellBlockError(
            f"HBase has lied about KeyValue length: expected {kv_len}, got {total}"
        )

    _require(data, pos + qualifier_len + 9 + value_len)
    qualifier = data[pos:pos + qualifier_len]
    pos += qualifier_len
    timestamp = int.from_bytes(data[pos:pos + 8], "big")
    pos += 8
    raw_type = data[pos]
    pos += 1
    value = data[pos:pos + value_len]

    try:
        cell_type: Any = CellType(raw_type)
    except ValueError:
        cell_type = raw_type

    cell = Cell(
        row=key,
        family=family,
        qualifier=qualifier,
        timestamp=timestamp,
        value=value,
        cell_type=cell_type,
    )
    return cell, kv_len + 4


def deserialize_cell_blocks(data: bytes, count: int) -> Tuple[List[Cell], int]:
    """Decode `count` consecutive cells; return them with the bytes read."""
    data = bytes(data)
    cells: List[Cell] = []
    read = 0
    for _ in range(count):
        cell, size = cell_from_cell_block(data[read:])
        cells.append(cell)
        read += size
    return cells, read


def to_local_result(message: Optional[ResultMessage]) -> Result:
    """Convert a result message to a Result, sharing its cell list."""
    if message is None:
        return Result()
    return Result(
        cells=message.cells,
        stale=bool(message.stale),
        partial=bool(message.partial),
        exists=message.exists,
    )
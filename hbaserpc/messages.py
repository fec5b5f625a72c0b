"""Message types exchanged with HBase region servers and the master."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union


class RegionSpecifierType(enum.IntEnum):
    """How a region is named in a request."""

    REGION_NAME = 1
    ENCODED_REGION_NAME = 2


class CellType(enum.IntEnum):
    """Type of a key-value cell."""

    MINIMUM = 0
    PUT = 4
    DELETE = 8
    DELETE_FAMILY_VERSION = 10
    DELETE_COLUMN = 12
    DELETE_FAMILY = 14
    MAXIMUM = 255


class MutationType(enum.IntEnum):
    """Kind of mutation carried by a MutationProto."""

    APPEND = 0
    INCREMENT = 1
    PUT = 2
    DELETE = 3


class DeleteType(enum.IntEnum):
    """Granularity of a delete mutation."""

    DELETE_ONE_VERSION = 0
    DELETE_MULTIPLE_VERSIONS = 1
    DELETE_FAMILY = 2
    DELETE_FAMILY_VERSION = 3


class SnapshotType(enum.IntEnum):
    """How a snapshot is taken."""

    DISABLED = 0
    FLUSH = 1
    SKIPFLUSH = 2


@dataclass
class RegionSpecifier:
    type: Optional[RegionSpecifierType] = None
    value: Optional[bytes] = None


@dataclass
class Cell:
    row: Optional[bytes] = None
    family: Optional[bytes] = None
    qualifier: Optional[bytes] = None
    timestamp: Optional[int] = None
    cell_type: Optional[Union[CellType, int]] = None
    value: Optional[bytes] = None


@dataclass
class ResultMessage:
    cells: List[Cell] = field(default_factory=list)
    associated_cell_count: Optional[int] = None
    exists: Optional[bool] = None
    stale: Optional[bool] = None
    partial: Optional[bool] = None


@dataclass
class TimeRange:
    from_: Optional[int] = None
    to: Optional[int] = None


@dataclass
class Column:
    family: Optional[bytes] = None
    qualifiers: List[bytes] = field(default_factory=list)


@dataclass
class GetMessage:
    row: Optional[bytes] = None
    columns: List[Column] = field(default_factory=list)
    filter: Any = None
    time_range: Optional[TimeRange] = None
    max_versions: Optional[int] = None
    cache_blocks: Optional[bool] = None
    store_limit: Optional[int] = None
    store_offset: Optional[int] = None
    existence_only: Optional[bool] = None


@dataclass
class GetRequest:
    region: Optional[RegionSpecifier] = None
    get: Optional[GetMessage] = None


@dataclass
class GetResponse:
    result: Optional[ResultMessage] = None


@dataclass
class ScanMessage:
    columns: List[Column] = field(default_factory=list)
    start_row: Optional[bytes] = None
    stop_row: Optional[bytes] = None
    filter: Any = None
    time_range: Optional[TimeRange] = None
    max_versions: Optional[int] = None
    cache_blocks: Optional[bool] = None
    max_result_size: Optional[int] = None
    store_limit: Optional[int] = None
    store_offset: Optional[int] = None
    reversed: Optional[bool] = None


@dataclass
class ScanRequest:
    region: Optional[RegionSpecifier] = None
    scan: Optional[ScanMessage] = None
    scanner_id: Optional[int] = None
    number_of_rows: Optional[int] = None
    close_scanner: Optional[bool] = None
    client_handles_partials: Optional[bool] = None
    client_handles_heartbeats: Optional[bool] = None


@dataclass
class ScanResponse:
    cells_per_result: List[int] = field(default_factory=list)
    scanner_id: Optional[int] = None
    more_results: Optional[bool] = None
    ttl: Optional[int] = None
    results: List[ResultMessage] = field(default_factory=list)
    stale: Optional[bool] = None
    partial_flag_per_result: List[bool] = field(default_factory=list)
    more_results_in_region: Optional[bool] = None
    heartbeat_message: Optional[bool] = None


@dataclass
class QualifierValue:
    qualifier: Optional[bytes] = None
    value: Optional[bytes] = None
    timestamp: Optional[int] = None
    delete_type: Optional[DeleteType] = None


@dataclass
class ColumnValue:
    family: Optional[bytes] = None
    qualifier_values: List[QualifierValue] = field(default_factory=list)


@dataclass
class NameBytesPair:
    name: Optional[str] = None
    value: Optional[bytes] = None


@dataclass
class MutationProto:
    row: Optional[bytes] = None
    mutate_type: Optional[MutationType] = None
    column_values: List[ColumnValue] = field(default_factory=list)
    timestamp: Optional[int] = None
    attributes: List[NameBytesPair] = field(default_factory=list)
    durability: Optional[int] = None
    associated_cell_count: Optional[int] = None


@dataclass
class MutateRequest:
    region: Optional[RegionSpecifier] = None
    mutation: Optional[MutationProto] = None


@dataclass
class MutateResponse:
    result: Optional[ResultMessage] = None
    processed: Optional[bool] = None


@dataclass
class TableName:
    namespace: Optional[bytes] = None
    qualifier: Optional[bytes] = None


@dataclass
class BytesBytesPair:
    first: Optional[bytes] = None
    second: Optional[bytes] = None


@dataclass
class ColumnFamilySchema:
    name: Optional[bytes] = None
    attributes: List[BytesBytesPair] = field(default_factory=list)


@dataclass
class TableSchema:
    table_name: Optional[TableName] = None
    column_families: List[ColumnFamilySchema] = field(default_factory=list)


@dataclass
class CreateTableRequest:
    table_schema: Optional[TableSchema] = None
    split_keys: List[bytes] = field(default_factory=list)


@dataclass
class CreateTableResponse:
    proc_id: Optional[int] = None


@dataclass
class DeleteTableRequest:
    table_name: Optional[TableName] = None


@dataclass
class DeleteTableResponse:
    proc_id: Optional[int] = None


@dataclass
class DisableTableRequest:
    table_name: Optional[TableName] = None


@dataclass
class DisableTableResponse:
    proc_id: Optional[int] = None


@dataclass
class EnableTableRequest:
    table_name: Optional[TableName] = None


@dataclass
class EnableTableResponse:
    proc_id: Optional[int] = None


@dataclass
class GetTableNamesRequest:
    regex: Optional[str] = None
    include_sys_tables: Optional[bool] = None
    namespace: Optional[str] = None


@dataclass
class GetTableNamesResponse:
    table_names: List[TableName] = field(default_factory=list)


@dataclass
class ServerName:
    host_name: Optional[str] = None
    port: Optional[int] = None
    start_code: Optional[int] = None


@dataclass
class MoveRegionRequest:
    region: Optional[RegionSpecifier] = None
    dest_server_name: Optional[ServerName] = None


@dataclass
class MoveRegionResponse:
    pass


@dataclass
class GetProcedureResultRequest:
    proc_id: Optional[int] = None


@dataclass
class GetProcedureResultResponse:
    state: Optional[int] = None
    start_time: Optional[int] = None
    last_update: Optional[int] = None
    result: Optional[bytes] = None


@dataclass
class SetBalancerRunningRequest:
    on: Optional[bool] = None
    synchronous: Optional[bool] = None


@dataclass
class SetBalancerRunningResponse:
    prev_balance_value: Optional[bool] = None


@dataclass
class GetClusterStatusRequest:
    pass


@dataclass
class GetClusterStatusResponse:
    cluster_status: Any = None


@dataclass
class SnapshotDescription:
    name: Optional[str] = None
    table: Optional[str] = None
    creation_time: Optional[int] = None
    type: Optional[SnapshotType] = None
    version: Optional[int] = None
    owner: Optional[str] = None


@dataclass
class SnapshotRequest:
    snapshot: Optional[SnapshotDescription] = None


@dataclass
class SnapshotResponse:
    expected_timeout: Optional[int] = None


@dataclass
class IsSnapshotDoneResponse:
    done: Optional[bool] = None
    snapshot: Optional[SnapshotDescription] = None


@dataclass
class DeleteSnapshotResponse:
    pass


@dataclass
class GetCompletedSnapshotsRequest:
    pass


@dataclass
class GetCompletedSnapshotsResponse:
    snapshots: List[SnapshotDescription] = field(default_factory=list)


@dataclass
class RestoreSnapshotResponse:
    proc_id: Optional[int] = None


@dataclass
class IsRestoreSnapshotDoneResponse:
    done: Optional[bool] = None
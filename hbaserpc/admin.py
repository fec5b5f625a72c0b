"""Administrative requests sent to the HBase master."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .call import Call, Option, OptionError, apply_options
from .messages import (
    BytesBytesPair,
    ColumnFamilySchema,
    CreateTableRequest,
    CreateTableResponse,
    DeleteTableRequest,
    DeleteTableResponse,
    DisableTableRequest,
    DisableTableResponse,
    EnableTableRequest,
    EnableTableResponse,
    GetClusterStatusRequest,
    GetClusterStatusResponse,
    GetProcedureResultRequest,
    GetProcedureResultResponse,
    GetTableNamesRequest,
    GetTableNamesResponse,
    MoveRegionRequest,
    MoveRegionResponse,
    RegionSpecifier,
    RegionSpecifierType,
    ServerName,
    SetBalancerRunningRequest,
    SetBalancerRunningResponse,
    TableName,
    TableSchema,
)
from .query import _as_bytes

DEFAULT_NAMESPACE = b"default"

DEFAULT_ATTRIBUTES: Dict[str, str] = {
    "BLOOMFILTER": "ROW",
    "VERSIONS": "3",
    "IN_MEMORY": "false",
    "KEEP_DELETED_CELLS": "false",
    "DATA_BLOCK_ENCODING": "FAST_DIFF",
    "TTL": "2147483647",
    "COMPRESSION": "NONE",
    "MIN_VERSIONS": "0",
    "BLOCKCACHE": "true",
    "BLOCKSIZE": "65536",
    "REPLICATION_SCOPE": "0",
}


class _TableCall(Call):
    """A master call that names a single table."""

    def __init__(self, table: Any) -> None:
        super().__init__(_as_bytes(table), b"")

    def _table_name(self) -> TableName:
        return TableName(namespace=DEFAULT_NAMESPACE, qualifier=self.table)


class CreateTable(_TableCall):
    """Create a table with the given column families.

    Each family gets every default attribute, overridden by the values given
    for it; attributes that have no default are ignored.
    """

    def __init__(
        self,
        table: Any,
        families: Optional[Mapping[str, Optional[Mapping[str, str]]]],
        *args: Callable[["CreateTable"], None],
    ) -> None:
        super().__init__(table)
        self.split_keys: List[bytes] = []
        for option in args:
            option(self)
        self.families: Dict[str, Dict[str, str]] = {}
        for family, attrs in (families or {}).items():
            attrs = attrs or {}
            self.families[family] = {
                key: attrs.get(key, default) for key, default in DEFAULT_ATTRIBUTES.items()
            }

    def name(self) -> str:
        return "CreateTable"

    def to_proto(self) -> CreateTableRequest:
        column_families = [
            ColumnFamilySchema(
                name=_as_bytes(family),
                attributes=[
                    BytesBytesPair(first=_as_bytes(k), second=_as_bytes(v))
                    for k, v in attrs.items()
                ],
            )
            for family, attrs in self.families.items()
        ]
        return CreateTableRequest(
            table_schema=TableSchema(
                table_name=self._table_name(),
                column_families=column_families,
            ),
            split_keys=list(self.split_keys),
        )

    def new_response(self) -> CreateTableResponse:
        return CreateTableResponse()


def split_keys(keys: Sequence[Any]) -> Callable[[CreateTable], None]:
    """Option setting the keys at which the new table is pre-split."""

    def apply(call: CreateTable) -> None:
        call.split_keys = [_as_bytes(k) for k in keys]

    return apply


class DeleteTable(_TableCall):
    """Delete a table."""

    def name(self) -> str:
        return "DeleteTable"

    def to_proto(self) -> DeleteTableRequest:
        return DeleteTableRequest(table_name=self._table_name())

    def new_response(self) -> DeleteTableResponse:
        return DeleteTableResponse()


class DisableTable(_TableCall):
    """Disable a table."""

    def name(self) -> str:
        return "DisableTable"

    def to_proto(self) -> DisableTableRequest:
        return DisableTableRequest(table_name=self._table_name())

    def new_response(self) -> DisableTableResponse:
        return DisableTableResponse()


class EnableTable(_TableCall):
    """Enable a table."""

    def name(self) -> str:
        return "EnableTable"

    def to_proto(self) -> EnableTableRequest:
        return EnableTableRequest(table_name=self._table_name())

    def new_response(self) -> EnableTableResponse:
        return EnableTableResponse()


class ListTableNames(Call):
    """List table names; by default every user table matches."""

    def __init__(self, *args: Option) -> None:
        super().__init__()
        self.regex = ".*"
        self.include_sys_tables = False
        self.namespace = ""
        apply_options(self, *args)

    def name(self) -> str:
        return "GetTableNames"

    def to_proto(self) -> GetTableNamesRequest:
        return GetTableNamesRequest(
            regex=self.regex,
            include_sys_tables=self.include_sys_tables,
            namespace=self.namespace,
        )

    def new_response(self) -> GetTableNamesResponse:
        return GetTableNamesResponse()


def _require_list(call: Call, option_name: str) -> ListTableNames:
    if not isinstance(call, ListTableNames):
        raise OptionError(f"{option_name} option can only be used with ListTableNames")
    return call


def list_regex(regex: str) -> Option:
    """Only list tables whose names match the regex."""

    def apply(call: Call) -> None:
        _require_list(call, "ListRegex").regex = regex

    return apply


def list_namespace(namespace: str) -> Option:
    """Only list tables in the given namespace."""

    def apply(call: Call) -> None:
        _require_list(call, "ListNamespace").namespace = namespace

    return apply


def list_sys_tables(include: bool) -> Option:
    """Include system tables in the listing."""

    def apply(call: Call) -> None:
        _require_list(call, "ListSysTables").include_sys_tables = include

    return apply


class MoveRegion(Call):
    """Move a region, named by its encoded name, to another region server."""

    def __init__(self, region_name: Any, *args: Option) -> None:
        super().__init__()
        self.request = MoveRegionRequest(
            region=RegionSpecifier(
                type=RegionSpecifierType.ENCODED_REGION_NAME,
                value=_as_bytes(region_name),
            )
        )
        apply_options(self, *args)

    def name(self) -> str:
        return "MoveRegion"

    def to_proto(self) -> MoveRegionRequest:
        return self.request

    def new_response(self) -> MoveRegionResponse:
        return MoveRegionResponse()


def _parse_uint(text: str, bits: int) -> int:
    if not text or not (text.isascii() and text.isdigit()):
        raise ValueError(f'parsing "{text}": invalid syntax')
    value = int(text)
    if value >= 1 << bits:
        raise ValueError(f'parsing "{text}": value out of range')
    return value


def with_destination_region_server(server_name: str) -> Option:
    """Move the region to the server named "<host>,<port>,<startcode>"."""

    def apply(call: Call) -> None:
        if not isinstance(call, MoveRegion):
            raise OptionError(
                "WithDestinationRegionServer option can only be used with MoveRegion"
            )
        parts = server_name.split(",", 2)
        if len(parts) != 3:
            raise OptionError(
                "invalid server name, needs to be of format <host>,<port>,<startcode>"
            )
        host, port_text, start_text = parts
        try:
            port = _parse_uint(port_text, 32)
        except ValueError as exc:
            raise OptionError(f"failed to parse port: {exc}") from exc
        try:
            start_code = _parse_uint(start_text, 64)
        except ValueError as exc:
            raise OptionError(f"failed to parse startcode: {exc}") from exc
        call.request.dest_server_name = ServerName(
            host_name=host, port=port, start_code=start_code
        )

    return apply


class GetProcedureState(Call):
    """Ask the master for the state of a procedure."""

    def __init__(self, proc_id: int) -> None:
        super().__init__()
        self.proc_id = proc_id

    def name(self) -> str:
        return "getProcedureResult"

    def to_proto(self) -> GetProcedureResultRequest:
        return GetProcedureResultRequest(proc_id=self.proc_id)

    def new_response(self) -> GetProcedureResultResponse:
        return GetProcedureResultResponse()


class SetBalancer(Call):
    """Turn the region balancer on or off."""

    def __init__(self, enabled: bool) -> None:
        super().__init__()
        self.request = SetBalancerRunningRequest(on=enabled)

    def name(self) -> str:
        return "SetBalancerRunning"

    def to_proto(self) -> SetBalancerRunningRequest:
        return self.request

    def new_response(self) -> SetBalancerRunningResponse:
        return SetBalancerRunningResponse()


class ClusterStatus(Call):
    """Ask the master for the cluster status."""

    def name(self) -> str:
        return "GetClusterStatus"

    def to_proto(self) -> GetClusterStatusRequest:
        return GetClusterStatusRequest()

    def new_response(self) -> GetClusterStatusResponse:
        return GetClusterStatusResponse()
"""Snapshot requests: take, check, delete, list and restore table snapshots."""

from __future__ import annotations

from typing import Optional

from .call import Call, Option, OptionError, apply_options
from .messages import (
    DeleteSnapshotResponse,
    GetCompletedSnapshotsRequest,
    GetCompletedSnapshotsResponse,
    IsRestoreSnapshotDoneResponse,
    IsSnapshotDoneResponse,
    RestoreSnapshotResponse,
    SnapshotDescription,
    SnapshotRequest,
    SnapshotResponse,
    SnapshotType,
)
from .query import _as_bytes


class Snapshot(Call):
    """Take a snapshot of a table."""

    def __init__(self, name: str, table: str, *args: Option) -> None:
        super().__init__(_as_bytes(table), b"")
        self.snapshot_name = name
        self.snapshot_table = table
        self.snapshot_type: Optional[SnapshotType] = None
        self.version = 0
        self.owner = ""
        apply_options(self, *args)

    def name(self) -> str:
        return "Snapshot"

    def description(self) -> SnapshotDescription:
        """Describe the snapshot this call refers to."""
        return SnapshotDescription(
            type=self.snapshot_type,
            table=self.snapshot_table,
            name=self.snapshot_name,
            version=self.version,
            owner=self.owner,
        )

    def to_proto(self) -> SnapshotRequest:
        return SnapshotRequest(snapshot=self.description())

    def new_response(self) -> SnapshotResponse:
        return SnapshotResponse()


def _require_snapshot(call: Call, option_name: str) -> Snapshot:
    if not isinstance(call, Snapshot):
        raise OptionError(
            f"'{option_name}' option can only be used with Snapshot queries"
        )
    return call


def snapshot_version(version: int) -> Option:
    """Set the version of the snapshot."""

    def apply(call: Call) -> None:
        _require_snapshot(call, "SnapshotVersion").version = version

    return apply


def snapshot_owner(owner: str) -> Option:
    """Set the owner of the snapshot."""

    def apply(call: Call) -> None:
        _require_snapshot(call, "SnapshotOwner").owner = owner

    return apply


def snapshot_skip_flush() -> Option:
    """Take the snapshot without flushing the table first."""

    def apply(call: Call) -> None:
        _require_snapshot(call, "SnapshotSkipFlush").snapshot_type = SnapshotType.SKIPFLUSH

    return apply


class SnapshotDone(Snapshot):
    """Ask whether a snapshot has completed."""

    def name(self) -> str:
        return "IsSnapshotDone"

    def new_response(self) -> IsSnapshotDoneResponse:
        return IsSnapshotDoneResponse()


class DeleteSnapshot(Snapshot):
    """Delete a snapshot."""

    def name(self) -> str:
        return "DeleteSnapshot"

    def new_response(self) -> DeleteSnapshotResponse:
        return DeleteSnapshotResponse()


class ListSnapshots(Call):
    """List all completed snapshots."""

    def name(self) -> str:
        return "GetCompletedSnapshots"

    def to_proto(self) -> GetCompletedSnapshotsRequest:
        return GetCompletedSnapshotsRequest()

    def new_response(self) -> GetCompletedSnapshotsResponse:
        return GetCompletedSnapshotsResponse()


class RestoreSnapshot(Snapshot):
    """Restore a table from a snapshot."""

    def name(self) -> str:
        return "RestoreSnapshot"

    def new_response(self) -> RestoreSnapshotResponse:
        return RestoreSnapshotResponse()


class RestoreSnapshotDone(Snapshot):
    """Ask whether a snapshot restore has completed."""

    def name(self) -> str:
        return "IsRestoreSnapshotDone"

    def new_response(self) -> IsRestoreSnapshotDoneResponse:
        return IsRestoreSnapshotDoneResponse()
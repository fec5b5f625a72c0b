# hbaserpc

`hbaserpc` builds HBase RPC requests and reads their responses. Each call is
a Python object. It turns its settings into a request message and gives an
empty response message of the matching type. It also reads and writes cells
in the KeyValue cell block format.

## What it covers

- **Data calls** (`hbaserpc.get`, `hbaserpc.scan`, `hbaserpc.mutate`):
  - `Get` reads one row.
  - `Scan` reads rows in order. It can be limited to the half-open key range
    `[start_row, stop_row)`.
  - `Mutate` changes one row. Build it with `new_put`, `new_del`, `new_app`,
    `new_inc` or `new_inc_single`.
- **Admin calls** (`hbaserpc.admin`): `CreateTable`, `DeleteTable`,
  `DisableTable`, `EnableTable`, `ListTableNames`, `MoveRegion`,
  `GetProcedureState`, `SetBalancer` and `ClusterStatus`.
- **Snapshot calls** (`hbaserpc.snapshot`): `Snapshot`, `SnapshotDone`,
  `DeleteSnapshot`, `ListSnapshots`, `RestoreSnapshot` and
  `RestoreSnapshotDone`.
- **Messages** (`hbaserpc.messages`): every request and response type, as
  dataclasses. Enums such as `CellType`, `MutationType` and `DeleteType` are
  `IntEnum`s.
- **Cell blocks and results** (`hbaserpc.call`):
  - `cell_from_cell_block` and `deserialize_cell_blocks` read cells.
  - `hbaserpc.mutate.to_cellblock` and `Mutate.serialize_cell_blocks` write
    them.
  - `to_local_result` turns a `ResultMessage` into a `Result`.

## Installing

```
pip install .
```

## Options

A call takes option functions after its required arguments. An option raises
`OptionError` in two cases: it does not apply to that call, or its value is
out of range.

```python
from datetime import timedelta

from hbaserpc.get import Get
from hbaserpc.query import families, max_versions, time_range_uint64
from hbaserpc.scan import Scan, number_of_rows, reversed_scan
from hbaserpc.mutate import new_put, new_del, ttl, timestamp_uint64, delete_one_version

get = Get(b"table", b"row", families({"cf": ["a", "b"]}), max_versions(3))

scan = Scan(b"table", number_of_rows(100), reversed_scan(),
            start_row=b"a", stop_row=b"z")

put = new_put(b"table", b"row", {"cf": {"q": b"value"}},
              timestamp_uint64(42), ttl(timedelta(seconds=1)))
delete = new_del(b"table", b"row", {"cf": None}, timestamp_uint64(42),
                 delete_one_version())
```

### Options for `Get` and `Scan`

These are in `hbaserpc.query`:

- `families`
- `filters`
- `time_range` (takes `datetime` values)
- `time_range_uint64` (takes milliseconds)
- `max_versions`
- `max_results_per_column_family`
- `result_offset`
- `cache_blocks`

`Get.exists_only()` asks only whether the row exists.

### Options for `Scan` only

These are in `hbaserpc.scan`:

- `scanner_id`
- `close_scanner`
- `max_result_size`
- `number_of_rows`
- `allow_partial_results`
- `reversed_scan`

### Options for mutations

These are in `hbaserpc.mutate`:

- `ttl` (takes a `timedelta`)
- `timestamp` (takes a `datetime`)
- `timestamp_uint64`
- `durability` (takes a `DurabilityType`)
- `delete_one_version`

`delete_one_version` on a delete of a whole row raises `OptionError`.

### Options for any batchable call

`hbaserpc.call.skip_batch()` marks a `Get` or a `Mutate` to be sent right
away instead of being batched.

### Options for admin and snapshot calls

- `CreateTable` takes `split_keys`. Each family starts from
  `DEFAULT_ATTRIBUTES`, and the attributes you give override those defaults.
- `ListTableNames` takes `list_regex`, `list_namespace` and
  `list_sys_tables`.
- `MoveRegion` takes `with_destination_region_server("host,port,startcode")`.
- `Snapshot` and the calls built on it take `snapshot_version`,
  `snapshot_owner` and `snapshot_skip_flush`.

## Building messages

`Get`, `Scan` and `Mutate` are routed to a region. Before you call
`to_proto()` on one of them, set its `region` attribute. The region can be
any object with a `name` attribute that holds the region name as bytes.
Without a region, `to_proto()` raises `ValueError`.

```python
class Region:
    name = b"region"

get.region = Region()
request = get.to_proto()           # a GetRequest dataclass
response = get.new_response()      # an empty GetResponse
```

You can also send a mutation with its cells as cell blocks:

```python
put.region = Region()
request, blocks, size = put.serialize_cell_blocks()
```

This gives three things:

- `request`: the message. It carries only the cell count.
- `blocks`: the byte parts to send after the message.
- `size`: the total length of those parts.

## Reading cell blocks

`deserialize_cell_blocks(data, count)` reads `count` cells from `data`. It
returns the cells and the number of bytes it read. It raises `CellBlockError`
in two cases: the buffer is too short, or a length field contradicts the
rest of the cell.

`Get`, `Scan` and `Mutate` each have a `deserialize_cell_blocks(response,
data)` method. It adds the decoded cells to a response message and returns
the number of bytes it read.

## Filters

`filters(f)` calls `f.to_proto()` if `f` has that method. Otherwise it uses
`f` as the filter message itself. This package has no filter classes of its
own.

## What it does not do

The package never opens a connection. It does not encode messages to
protobuf bytes and does not send requests. It does not look up regions,
retry calls or iterate over scanner results. A transport layer has to
provide all of that. Each call has a `results` queue where such a layer can
put an `RPCResult`.

## Running the tests

```
pip install .[test]
pytest
```
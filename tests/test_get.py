from dataclasses import dataclass

import pytest

from hbaserpc.call import CellBlockError, OptionError
from hbaserpc.get import Get, families_to_columns
from hbaserpc.messages import (
    Cell,
    CellType,
    Column,
    GetMessage,
    GetRequest,
    GetResponse,
    RegionSpecifier,
    RegionSpecifierType,
    ResultMessage,
    TimeRange,
)
from hbaserpc.query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    MAX_INT32,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    cache_blocks,
    families,
    filters,
    max_results_per_column_family,
    max_versions,
    result_offset,
    time_range_uint64,
)

CELLBLOCK = bytes([
    0, 0, 0, 48, 0, 0, 0, 19, 0, 0, 0, 21, 0, 4, 114, 111, 119, 55, 2, 99,
    102, 97, 0, 0, 1, 92, 13, 97, 5, 32, 4, 72, 101, 108, 108, 111, 32, 109, 121, 32, 110,
    97, 109, 101, 32, 105, 115, 32, 68, 111, 103, 46,
])

RS = RegionSpecifier(type=RegionSpecifierType.REGION_NAME, value=b"region")


@dataclass
class _Region:
    name: bytes


class _Filter:
    def __init__(self, label):
        self.label = label

    def to_proto(self):
        return {"filter": self.label}


def _cell(qualifier, cell_type):
    return Cell(
        row=b"row7",
        family=b"cf",
        qualifier=qualifier,
        timestamp=1494873081120,
        value=b"Hello my name is Dog.",
        cell_type=cell_type,
    )


def test_new_get_attributes():
    fam = {"info": ["c1"]}
    flt = _Filter("first-key-only")

    get = Get(b"test", b"45")
    assert (get.table, get.key, get.families, get.filter) == (b"test", b"45", None, None)

    get = Get("test", "45")
    assert (get.table, get.key) == (b"test", b"45")

    get = Get(b"test", b"45", families(fam))
    assert get.families == fam and get.filter is None

    get = Get(b"test", b"45", filters(flt))
    assert get.filter == {"filter": "first-key-only"} and get.families is None

    get = Get(b"test", b"45", filters(flt), families(fam))
    assert get.families == fam and get.filter == {"filter": "first-key-only"}

    get = Get(b"test", b"45", filters(flt))
    families(fam)(get)
    assert get.families == fam and get.filter == {"filter": "first-key-only"}


def test_new_get_max_versions_bounds():
    assert Get(b"test", b"45", max_versions(MAX_INT32)).max_versions == MAX_INT32
    with pytest.raises(OptionError) as exc:
        Get(b"test", b"45", max_versions(MAX_INT32 + 1))
    assert str(exc.value) == "'MaxVersions' exceeds supported number of versions"


def test_name_and_response():
    get = Get(b"t", b"k")
    assert get.name() == "Get"
    assert get.new_response() == GetResponse()
    assert get.batchable is True


def _to_proto(get):
    get.region = _Region(b"region")
    return get.to_proto()


def test_to_proto_defaults():
    assert _to_proto(Get("", "key")) == GetRequest(
        region=RS,
        get=GetMessage(row=b"key", columns=[], time_range=TimeRange()),
    )


def test_to_proto_explicit_defaults():
    get = Get(
        "",
        "key",
        max_results_per_column_family(DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY),
        result_offset(0),
        max_versions(DEFAULT_MAX_VERSIONS),
        cache_blocks(DEFAULT_CACHE_BLOCKS),
        time_range_uint64(MIN_TIMESTAMP, MAX_TIMESTAMP),
    )
    assert _to_proto(get) == GetRequest(
        region=RS,
        get=GetMessage(row=b"key", columns=[], time_range=TimeRange()),
    )


def test_to_proto_non_defaults():
    get = Get(
        "",
        "key",
        max_results_per_column_family(22),
        result_offset(7),
        max_versions(4),
        cache_blocks(not DEFAULT_CACHE_BLOCKS),
        time_range_uint64(3456, 6789),
    )
    assert _to_proto(get) == GetRequest(
        region=RS,
        get=GetMessage(
            row=b"key",
            columns=[],
            time_range=TimeRange(from_=3456, to=6789),
            store_limit=22,
            store_offset=7,
            max_versions=4,
            cache_blocks=False,
        ),
    )


def test_to_proto_filters_families_exists_only():
    fam = {"cookie": ["got", "it"]}
    get = Get("", "key", filters(_Filter("list")), families(fam))
    get.exists_only()
    assert _to_proto(get) == GetRequest(
        region=RS,
        get=GetMessage(
            row=b"key",
            columns=[Column(family=b"cookie", qualifiers=[b"got", b"it"])],
            time_range=TimeRange(),
            existence_only=True,
            filter={"filter": "list"},
        ),
    )


def test_to_proto_without_region_fails():
    with pytest.raises(ValueError):
        Get("", "key").to_proto()


def test_families_to_columns():
    assert families_to_columns(None) == []
    assert families_to_columns({"a": [], "b": ["x"]}) == [
        Column(family=b"a", qualifiers=[]),
        Column(family=b"b", qualifiers=[b"x"]),
    ]


def test_deserialize_cell_blocks():
    first = _cell(b"b", None)
    response = GetResponse(result=ResultMessage(cells=[first], associated_cell_count=1))
    read = Get(b"", b"").deserialize_cell_blocks(response, CELLBLOCK)
    assert read == len(CELLBLOCK) == 52
    assert response.result.cells == [first, _cell(b"a", CellType.PUT)]


def test_deserialize_cell_blocks_error():
    response = GetResponse(result=ResultMessage(associated_cell_count=1))
    with pytest.raises(CellBlockError):
        Get(b"", b"").deserialize_cell_blocks(response, CELLBLOCK[:10])


def test_deserialize_cell_blocks_without_result():
    response = GetResponse()
    assert Get(b"", b"").deserialize_cell_blocks(response, CELLBLOCK) == 0
    assert response.result is None
import pytest

from jsponfs.core.errors import CodecError, MalformedDocument
from jsponfs.core.expand import expand
from jsponfs.core.model import Reference


@pytest.mark.parametrize(
    "document",
    [
        [],
        "string",
        None,
        {"id": "x"},
        {"__CLASS__": "Point"},
        {"id": 5, "data": 1},
        {"__CLASS__": ["Point"], "data": 1},
        {"id": "x", "data": 1, "extra": True},
        {"$ref": "x"},
    ],
)
def test_malformed_top_level(document: object) -> None:
    with pytest.raises(MalformedDocument):
        expand(document)


@pytest.mark.parametrize(
    "child",
    [
        {"$ref": "C", "other": 1},
        {"$ref": "C", "data": 1},
        {"$ref": 42},
        {"$ref": "C", "weak": "yes"},
        {"$ref": "C", "weak": 2},
        {"weak": True},
        {"id": "orphan"},
        {"__CLASS__": "Orphan", "x": 1},
        {"data": 1, "unexpected": 2},
    ],
)
def test_malformed_nested_nodes(child: object) -> None:
    with pytest.raises(MalformedDocument) as ei:
        expand({"id": "P", "data": {"child": child}})
    assert ei.value.path == "/data/child"


def test_malformed_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        expand({"data": {"$ref": None}})
    assert issubclass(MalformedDocument, CodecError)


def test_legacy_integer_weak_flag_is_accepted() -> None:
    entry = expand({"id": "P", "data": [{"$ref": "C", "weak": 1}, {"$ref": "D", "weak": 0}]})
    assert entry.data == [Reference("C", is_weak=True), Reference("D", is_weak=False)]


def test_class_name_key_is_not_an_alias_for_class() -> None:
    entry = expand({"id": "P", "data": {"class_name": "user value"}})
    assert entry.class_name is None
    assert entry.data == {"class_name": "user value"}


def test_error_message_carries_entry_id() -> None:
    err = MalformedDocument("bad", path="/data", entry_id="A1")
    assert "A1" in str(err)
    assert "/data" in str(err)
    assert err.entry_id == "A1"

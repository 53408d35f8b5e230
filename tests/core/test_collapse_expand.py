from __future__ import annotations

from collections import OrderedDict

import pytest

from jsponfs.core.collapse import collapse, collapse_value
from jsponfs.core.errors import UnsupportedValueKind
from jsponfs.core.expand import expand
from jsponfs.core.model import Entry, Reference


def test_collapse_wraps_entry_and_omits_absent_fields() -> None:
    assert collapse(Entry(data=[1, 2])) == {"data": [1, 2]}
    assert collapse(Entry(id="A1", class_name="Point", data={"x": 1, "y": 2})) == {
        "__CLASS__": "Point",
        "id": "A1",
        "data": {"x": 1, "y": 2},
    }


def test_weak_reference_scenario() -> None:
    entry = Entry(id="P", data={"child": Reference("C", is_weak=True)})
    doc = collapse(entry)
    assert doc["data"]["child"] == {"$ref": "C", "weak": True}

    back = expand(doc)
    assert back == entry
    assert isinstance(back.data["child"], Reference)
    assert back.data["child"].is_weak is True


def test_strong_reference_has_no_weak_key() -> None:
    doc = collapse(Entry(id="P", data={"child": Reference("C")}))
    assert doc["data"]["child"] == {"$ref": "C"}
    assert expand(doc).data["child"] == Reference("C", is_weak=False)


@pytest.mark.parametrize(
    "entry",
    [
        Entry(id="A1", class_name="Point", data={"x": 1, "y": 2}),
        Entry(id="s", data="plain string"),
        Entry(id="n", data=None),
        Entry(id="f", data=[1.5, True, False, None, "x", {"deep": [{"deeper": 0}]}]),
        Entry(data={"anonymous": True}),
        Entry(
            id="g",
            class_name="Graph",
            data={
                "nodes": [Reference("n1"), Reference("n2", is_weak=True)],
                "meta": {"id": "user-id", "$ref": "not-a-ref", "__CLASS__": "x"},
                "inline": Entry(class_name="Edge", data={"from": Reference("n1")}),
                "named_inline": Entry(id="sub", data={"data": 1, "weak": 2}),
            },
        ),
        Entry(id="esc", data={"public::id": 1, "public::public::x": 2, "data": {"data": 3}}),
    ],
)
def test_roundtrip_preserves_id_class_and_data(entry: Entry) -> None:
    assert expand(collapse(entry)) == entry


def test_tuples_collapse_to_lists() -> None:
    doc = collapse(Entry(id="t", data=(1, (2, 3))))
    assert doc["data"] == [1, [2, 3]]
    assert expand(doc).data == [1, [2, 3]]


def test_mapping_order_is_preserved() -> None:
    data = OrderedDict([("z", 1), ("a", 2), ("m", 3)])
    doc = collapse(Entry(id="o", data=data))
    assert list(doc["data"].keys()) == ["z", "a", "m"]


def test_nested_entry_collapses_to_envelope() -> None:
    doc = collapse(Entry(id="outer", data={"inner": Entry(class_name="Inner", data=[1])}))
    assert doc["data"]["inner"] == {"__CLASS__": "Inner", "data": [1]}
    inner = expand(doc).data["inner"]
    assert isinstance(inner, Entry)
    assert inner.id is None
    assert inner.class_name == "Inner"


def test_root_flag_is_not_written_and_excluded_from_equality() -> None:
    doc = collapse(Entry(id="r", data=1, root=True))
    assert "root" not in doc
    assert expand(doc) == Entry(id="r", data=1, root=True)
    assert expand(doc).root is False


def test_extra_attrs_are_injected() -> None:
    entry = expand({"id": "r", "data": 1}, root=True)
    assert entry.root is True


def test_extra_attrs_reject_unknown_fields() -> None:
    with pytest.raises(TypeError):
        expand({"id": "r", "data": 1}, colour="red")


class _Opaque:
    pass


@pytest.mark.parametrize(
    "value",
    [
        _Opaque(),
        b"bytes",
        {1: "int key"},
        {"ok": [1, {"nested": object()}]},
        {1, 2},
        float("nan"),
        float("inf"),
        {"w": float("-inf")},
    ],
)
def test_unsupported_values_fail_hard(value: object) -> None:
    with pytest.raises(UnsupportedValueKind):
        collapse(Entry(id="bad", data=value))


def test_unsupported_value_reports_path() -> None:
    with pytest.raises(UnsupportedValueKind) as ei:
        collapse(Entry(id="bad", data={"items": [1, 2, _Opaque()]}))
    assert ei.value.path == "/data/items/2"
    assert "_Opaque" in str(ei.value)


def test_non_finite_float_reports_path() -> None:
    with pytest.raises(UnsupportedValueKind) as ei:
        collapse(Entry(id="n", data={"v": 1.5, "w": float("nan")}))
    assert ei.value.path == "/data/w"


def test_self_containing_dict_is_rejected() -> None:
    d: dict = {"x": 1}
    d["self"] = d
    with pytest.raises(UnsupportedValueKind) as ei:
        collapse(Entry(id="c", data=d))
    assert ei.value.path == "/data/self"
    assert "cyclic" in str(ei.value)


def test_cycle_through_list_and_nested_entry_is_rejected() -> None:
    inner = Entry(data=[])
    inner.data.append({"back": inner})
    with pytest.raises(UnsupportedValueKind):
        collapse(Entry(id="c", data={"inner": inner}))


def test_shared_container_without_cycle_is_allowed() -> None:
    shared = [1, 2]
    doc = collapse(Entry(id="s", data={"a": shared, "b": shared, "c": [shared, shared]}))
    assert doc["data"] == {"a": [1, 2], "b": [1, 2], "c": [[1, 2], [1, 2]]}


def test_collapse_rejects_non_entry() -> None:
    with pytest.raises(UnsupportedValueKind):
        collapse({"id": "x", "data": 1})  # type: ignore[arg-type]


def test_collapse_value_without_envelope() -> None:
    assert collapse_value({"id": Reference("x")}) == {"public::id": {"$ref": "x"}}

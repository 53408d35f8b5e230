import pytest

from jsponfs.core.errors import MalformedDocument
from jsponfs.core.serde import (
    decode_document,
    encode_document,
    json_dumps_canonical,
    json_dumps_pretty,
)


def test_canonical_encoding_is_sorted_compact_and_unicode() -> None:
    s1 = json_dumps_canonical({"b": 2, "a": 1, "emoji": "🙂"})
    s2 = json_dumps_canonical({"emoji": "🙂", "a": 1, "b": 2})
    assert s1 == s2 == '{"a":1,"b":2,"emoji":"🙂"}'


def test_pretty_changes_layout_not_meaning() -> None:
    doc = {"id": "A1", "data": {"y": 2, "x": 1}}
    compact = encode_document(doc)
    pretty = encode_document(doc, pretty=True)
    assert compact != pretty
    assert b"\n" in pretty
    assert pretty.decode("utf-8") == json_dumps_pretty(doc)
    assert decode_document(compact) == decode_document(pretty) == doc


def test_decode_accepts_text() -> None:
    assert decode_document('{"data":1}') == {"data": 1}


@pytest.mark.parametrize("raw", [b"{not json", b"\xff\xfe\x00", b"", '{"data":'])
def test_decode_rejects_garbage(raw: bytes | str) -> None:
    with pytest.raises(MalformedDocument):
        decode_document(raw)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
@pytest.mark.parametrize("pretty", [False, True])
def test_encoding_refuses_non_finite_floats(value: float, pretty: bool) -> None:
    with pytest.raises(ValueError):
        encode_document({"data": {"v": value}}, pretty=pretty)

import pytest

from aamva_barcode.binary_parser import BinaryParser, ParseContext
from aamva_barcode.types import FieldKind, SchemaError, TruncatedInputError


def _stop_at(char: str):
    return lambda byte, context: byte == ord(char)


def test_fixed_string_and_int_fields():
    """Test that fixed fields consume exactly their declared width."""
    parser = BinaryParser().string("tag", length=2).int("count", length=3).string("rest", length=1)

    record, consumed = parser.parse(b"AB042Z")

    assert record == {"tag": "AB", "count": 42, "rest": "Z"}
    assert consumed == 6


def test_unparsable_int_reads_as_zero():
    parser = BinaryParser().int("a", length=2).int("b", length=2).int("c", length=2)

    record, consumed = parser.parse(b"x1  -5")

    assert record == {"a": 0, "b": 0, "c": 0}
    assert consumed == 6


def test_string_formatter_applied():
    parser = BinaryParser().string("code", length=3, formatter=str.lower)

    assert parser.parse(b"ABC").record == {"code": "abc"}


def test_buffer_consumes_terminator_but_excludes_it():
    parser = BinaryParser().buffer("data", read_until=_stop_at("|")).string("after", length=2)

    record, consumed = parser.parse(b"hello|OK")

    assert record == {"data": b"hello", "after": "OK"}
    assert consumed == 8


def test_strict_buffer_without_terminator_raises():
    parser = BinaryParser().string("tag", length=1).buffer("data", read_until=_stop_at("|"))

    with pytest.raises(TruncatedInputError) as exc_info:
        parser.parse(b"Xno terminator here")

    assert exc_info.value.offset == 1
    assert exc_info.value.code == "TruncatedInput"


def test_lenient_buffer_runs_to_end_of_input():
    parser = BinaryParser().buffer("data", read_until=_stop_at("|"), strict=False)

    record, consumed = parser.parse(b"abc")

    assert record == {"data": b"abc"}
    assert consumed == 3


def test_fixed_field_past_end_raises():
    parser = BinaryParser().string("tag", length=4)

    with pytest.raises(TruncatedInputError):
        parser.parse(b"AB")


def test_array_count_from_previous_field():
    """Test arrays sized by an earlier field, with the cursor advancing per element."""
    item = BinaryParser().string("code", length=2).int("value", length=1)
    parser = (
        BinaryParser()
        .int("count", length=1)
        .array("items", parser=item, length="count")
        .string("tail", length=1)
    )

    record, consumed = parser.parse(b"3AA1BB2CC3!")

    assert record["items"] == [
        {"code": "AA", "value": 1},
        {"code": "BB", "value": 2},
        {"code": "CC", "value": 3},
    ]
    assert record["tail"] == "!"
    assert consumed == 11


def test_array_with_literal_and_zero_count():
    item = BinaryParser().string("code", length=1)
    parser = (
        BinaryParser()
        .int("none", length=1)
        .array("empty", parser=item, length="none")
        .array("pair", parser=item, length=2)
    )

    record, consumed = parser.parse(b"0xy")

    assert record == {"none": 0, "empty": [], "pair": [{"code": "x"}, {"code": "y"}]}
    assert consumed == 3


def test_child_stop_predicate_reads_parent_field():
    """Test that array elements see the enclosing record's parsed values."""

    def is_terminator(byte: int, context: ParseContext) -> bool:
        return byte == ord(context.parent["terminator"])

    item = BinaryParser().string("type", length=1).buffer("data", read_until=is_terminator)
    parser = (
        BinaryParser()
        .string("terminator", length=1)
        .array("items", parser=item, length=2)
    )

    record, consumed = parser.parse(b";Afirst;Bsecond;")

    assert record["items"] == [
        {"type": "A", "data": b"first"},
        {"type": "B", "data": b"second"},
    ]
    assert consumed == 16


def test_stop_predicate_reads_same_record_field():
    parser = (
        BinaryParser()
        .string("end", length=1)
        .buffer("data", read_until=lambda byte, context: byte == ord(context["end"]))
    )

    assert parser.parse(b"#abc#").record == {"end": "#", "data": b"abc"}


def test_builder_returns_new_parser():
    base = BinaryParser().string("a", length=1)
    extended = base.string("b", length=1)

    assert [f.name for f in base.schema] == ["a"]
    assert [f.name for f in extended.schema] == ["a", "b"]
    assert extended.schema[1].kind is FieldKind.STRING


def test_parse_accepts_bytearray_and_memoryview():
    parser = BinaryParser().string("tag", length=2)

    assert parser.parse(bytearray(b"OK")).record == {"tag": "OK"}
    assert parser.parse(memoryview(b"OK")).record == {"tag": "OK"}


@pytest.mark.parametrize("length", [0, -1])
def test_zero_width_fixed_field_rejected(length):
    with pytest.raises(SchemaError):
        BinaryParser().string("empty", length=length)


def test_schema_errors():
    item = BinaryParser().string("x", length=1)

    with pytest.raises(SchemaError):
        BinaryParser().array("items", parser=item, length="missing")
    with pytest.raises(SchemaError):
        BinaryParser().string("a", length=1).string("a", length=1)
    with pytest.raises(SchemaError):
        BinaryParser().buffer("data", read_until=None)

import pytest

from aamva_barcode.component_index import (
    ComponentIndexCodec,
    bitmask_for_ordinal,
    component_index_for_fields,
    decode_component_index,
    encode_component_index,
    fields_for_component_index,
)
from aamva_barcode.types import (
    MANDATORY_FIELDS,
    IndexOutOfRangeError,
    InvalidByteLengthError,
    InvalidComponentIndexEncodingError,
    InvalidLengthError,
    InvalidMultibaseHeaderError,
    InvalidReservedBitsError,
    InvalidSelectorError,
)


def test_mandatory_fields_sorted_by_code_point():
    assert len(MANDATORY_FIELDS) == 22
    assert list(MANDATORY_FIELDS) == sorted(MANDATORY_FIELDS)
    assert MANDATORY_FIELDS[0] == "DAC"
    assert MANDATORY_FIELDS[-1] == "DDG"


@pytest.mark.parametrize("ordinal, expected", [
    (0, 0b100000000000000000000000),
    (1, 0b010000000000000000000000),
    (23, 0b1),
])
def test_bitmask_for_ordinal(ordinal, expected):
    assert bitmask_for_ordinal(ordinal) == expected


def test_bitmasks_are_distinct_single_bits():
    masks = [bitmask_for_ordinal(i) for i in range(24)]

    assert all(bin(mask).count("1") == 1 for mask in masks)
    assert len(set(masks)) == 24


@pytest.mark.parametrize("ordinal", [-1, 24, 100])
def test_bitmask_out_of_range(ordinal):
    with pytest.raises(IndexOutOfRangeError, match="Index out of bounds"):
        bitmask_for_ordinal(ordinal)


@pytest.mark.parametrize("encoded, expected", [
    ("uP_BA", 0b001111111111000001000000),
    ("u___8", 0b111111111111111111111100),
    ("uAAAA", 0),
])
def test_decode_component_index(encoded, expected):
    assert decode_component_index(encoded) == expected


@pytest.mark.parametrize("header", ["v", "z", "0", "1", "2", "3", "4", "5"])
def test_decode_invalid_multibase_header(header):
    with pytest.raises(InvalidMultibaseHeaderError, match="Invalid multibase header"):
        decode_component_index(f"{header}____")


@pytest.mark.parametrize("encoded", ["", "u", "uP", "uP_", "uP__", "uP___X"])
def test_decode_invalid_length(encoded):
    with pytest.raises(InvalidLengthError, match="exactly 5 characters"):
        decode_component_index(encoded)


@pytest.mark.parametrize("encoded", ["uAA==", "uAAA="])
def test_decode_invalid_byte_length(encoded):
    with pytest.raises(InvalidByteLengthError):
        decode_component_index(encoded)


@pytest.mark.parametrize("encoded", ["uP+BA", "uP/BA", "uP BA", "uA=AA", "uAAA\n", "uAA\nA"])
def test_decode_rejects_non_base64url_characters(encoded):
    with pytest.raises(InvalidComponentIndexEncodingError):
        decode_component_index(encoded)


@pytest.mark.parametrize("value", [
    *(bitmask_for_ordinal(i) for i in range(22)),
    0,
    0b001111111111000001000000,
    0b111111111111111111111100,
    0b100000000000000000000100,
    0b010101010101010101010100,
    0b101010101010101010101000,
    bitmask_for_ordinal(0) | bitmask_for_ordinal(21),
])
def test_encode_then_decode(value):
    """Every index with clear reserved bits survives encoding."""
    encoded = encode_component_index(value)

    assert len(encoded) == 5
    assert encoded[0] == "u"
    assert decode_component_index(encoded) == value


def test_encode_from_bit_string():
    assert encode_component_index("001111111111000001000000") == "uP_BA"
    assert encode_component_index("111111111111111111111100") == "u___8"


@pytest.mark.parametrize("field_index", [0b01, 0b10, 0b111111111111111111111111, "000000000000000000000011"])
def test_encode_rejects_reserved_bits(field_index):
    with pytest.raises(InvalidReservedBitsError):
        encode_component_index(field_index)


def test_encode_rejects_malformed_field_index():
    with pytest.raises(InvalidLengthError):
        encode_component_index("0011")
    with pytest.raises(InvalidComponentIndexEncodingError):
        encode_component_index("00111111111100000100000x")
    with pytest.raises(InvalidByteLengthError):
        encode_component_index(1 << 24)
    with pytest.raises(InvalidByteLengthError):
        encode_component_index(-4)


def test_fields_for_component_index():
    assert fields_for_component_index(decode_component_index("uP_BA")) == (
        "DAG", "DAI", "DAJ", "DAK", "DAQ", "DAU", "DAY", "DBA", "DBB", "DBC", "DCG",
    )
    assert fields_for_component_index(decode_component_index("u___8")) == MANDATORY_FIELDS
    assert fields_for_component_index(0) == ()


def test_component_index_for_fields():
    codes = ["DCG", "DAG", "DAI", "DAJ", "DAK", "DAQ", "DAU", "DAY", "DBA", "DBB", "DBC"]

    index = component_index_for_fields(codes)

    assert index == 0b001111111111000001000000
    assert encode_component_index(index) == "uP_BA"
    assert component_index_for_fields(MANDATORY_FIELDS) == 0b111111111111111111111100


def test_component_index_for_non_mandatory_field():
    with pytest.raises(InvalidSelectorError):
        component_index_for_fields(["DAQ", "DAW"])


def test_codec_class_matches_module_functions():
    assert ComponentIndexCodec.decode("uP_BA") == decode_component_index("uP_BA")
    assert ComponentIndexCodec.encode(0) == "uAAAA"

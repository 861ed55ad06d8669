"""
Component Index Encoding.

A component index is a 24-bit bitmap over the sorted AAMVA mandatory element
set: bit 23 selects the first sorted code, bit 2 the twenty-second. Bits 0-1
are reserved and must be zero. Its text form is a multibase string: the
header ``u`` (base64url, no padding) followed by four base64url characters
encoding the three bitmap bytes.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Iterable

from .types import (
    MANDATORY_FIELDS,
    IndexOutOfRangeError,
    InvalidByteLengthError,
    InvalidComponentIndexEncodingError,
    InvalidLengthError,
    InvalidMultibaseHeaderError,
    InvalidReservedBitsError,
    InvalidSelectorError,
)

MULTIBASE_BASE64URL_HEADER = "u"
COMPONENT_INDEX_BITS = 24
COMPONENT_INDEX_BYTES = COMPONENT_INDEX_BITS // 8
ENCODED_LENGTH = 5
RESERVED_BITS_MASK = 0b11

_BASE64URL_PATTERN = re.compile(r"[A-Za-z0-9_-]*={0,2}")


class ComponentIndexCodec:
    """Encode, decode and interpret component indexes."""

    @staticmethod
    def decode(encoded: str) -> int:
        """
        Decode the multibase text form to a 24-bit integer.

        Args:
            encoded: Five character multibase string, e.g. ``uP_BA``

        Returns:
            Component index as an integer

        Raises:
            InvalidLengthError: If the text is not exactly five characters
            InvalidMultibaseHeaderError: If the header is not ``u``
            InvalidByteLengthError: If the payload does not decode to three bytes
        """
        if len(encoded) != ENCODED_LENGTH:
            msg = f"Encoded value must be exactly {ENCODED_LENGTH} characters long."
            raise InvalidLengthError(msg)

        header = encoded[0]
        if header != MULTIBASE_BASE64URL_HEADER:
            msg = f"Invalid multibase header. Expected base64url ('u'), got {header!r}."
            raise InvalidMultibaseHeaderError(msg)

        payload = _decode_base64url(encoded[1:])
        if len(payload) != COMPONENT_INDEX_BYTES:
            msg = f"Decoded value must be exactly {COMPONENT_INDEX_BYTES} bytes ({COMPONENT_INDEX_BITS} bits)."
            raise InvalidByteLengthError(msg)

        return payload[0] << 16 | payload[1] << 8 | payload[2]

    @staticmethod
    def encode(field_index: int | str) -> str:
        """
        Encode a 24-bit field index to its multibase text form.

        Args:
            field_index: Integer bitmap, or a string of 24 ``0``/``1`` characters
                with the most significant bit first

        Returns:
            Five character multibase string

        Raises:
            InvalidReservedBitsError: If either reserved low-order bit is set
        """
        value = ComponentIndexCodec._coerce_field_index(field_index)
        ComponentIndexCodec.check_reserved_bits(value)
        payload = value.to_bytes(COMPONENT_INDEX_BYTES, "big")
        encoded = base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")
        return MULTIBASE_BASE64URL_HEADER + encoded

    @staticmethod
    def bitmask_for_ordinal(ordinal: int) -> int:
        """Return the single-bit mask selecting mandatory field ``ordinal``."""
        if isinstance(ordinal, bool) or not isinstance(ordinal, int):
            msg = f"Ordinal must be an integer, got {type(ordinal).__name__}"
            raise IndexOutOfRangeError(msg)
        if not 0 <= ordinal < COMPONENT_INDEX_BITS:
            msg = f"Index out of bounds. Must be between 0 and {COMPONENT_INDEX_BITS - 1}."
            raise IndexOutOfRangeError(msg)
        return 1 << (COMPONENT_INDEX_BITS - 1 - ordinal)

    @staticmethod
    def check_reserved_bits(value: int) -> None:
        if value & RESERVED_BITS_MASK:
            msg = "Invalid component index: the two reserved low-order bits must be 00."
            raise InvalidReservedBitsError(msg)

    @staticmethod
    def fields_for_index(component_index: int) -> tuple[str, ...]:
        """List the mandatory codes selected by an index, in sorted order."""
        return tuple(
            code
            for ordinal, code in enumerate(MANDATORY_FIELDS)
            if component_index & ComponentIndexCodec.bitmask_for_ordinal(ordinal)
        )

    @staticmethod
    def index_for_fields(codes: Iterable[str]) -> int:
        """Build the component index selecting the given mandatory codes."""
        index = 0
        for code in codes:
            try:
                ordinal = MANDATORY_FIELDS.index(code)
            except ValueError as e:
                msg = f"'{code}' is not a mandatory element and has no component index bit"
                raise InvalidSelectorError(msg) from e
            index |= ComponentIndexCodec.bitmask_for_ordinal(ordinal)
        return index

    @staticmethod
    def _coerce_field_index(field_index: int | str) -> int:
        if isinstance(field_index, str):
            if len(field_index) != COMPONENT_INDEX_BITS:
                msg = f"Field index must be exactly {COMPONENT_INDEX_BITS} bits long."
                raise InvalidLengthError(msg)
            if set(field_index) - {"0", "1"}:
                msg = "Field index bit string may only contain '0' and '1'."
                raise InvalidComponentIndexEncodingError(msg)
            return int(field_index, 2)

        if isinstance(field_index, bool) or not isinstance(field_index, int):
            msg = f"Field index must be an integer or bit string, got {type(field_index).__name__}"
            raise InvalidComponentIndexEncodingError(msg)
        if not 0 <= field_index < 1 << COMPONENT_INDEX_BITS:
            msg = f"Field index must fit in exactly {COMPONENT_INDEX_BYTES} bytes ({COMPONENT_INDEX_BITS} bits)."
            raise InvalidByteLengthError(msg)
        return field_index


def _decode_base64url(text: str) -> bytes:
    if not _BASE64URL_PATTERN.fullmatch(text):
        msg = f"Invalid base64url payload: {text!r}"
        raise InvalidComponentIndexEncodingError(msg)
    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.urlsafe_b64decode(padded)
    except binascii.Error as e:
        msg = f"Invalid base64url payload: {e}"
        raise InvalidComponentIndexEncodingError(msg) from e


decode_component_index = ComponentIndexCodec.decode
encode_component_index = ComponentIndexCodec.encode
bitmask_for_ordinal = ComponentIndexCodec.bitmask_for_ordinal
component_index_for_fields = ComponentIndexCodec.index_for_fields
fields_for_component_index = ComponentIndexCodec.fields_for_index

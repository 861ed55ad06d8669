"""
AAMVA Container Decoding.

This module describes the AAMVA card design barcode layout as a BinaryParser
schema and decodes raw PDF417 payloads into an AAMVAContainer:

- header: compliance indicator, the three separator characters, file type,
  issuer identification number, AAMVA and jurisdiction versions
- subfile directory: ``numberOfEntries`` entries of type/offset/length
- subfiles: ``numberOfEntries`` designator + payload runs, each ended by the
  header's segment terminator

Subfile payloads are tokenized on the header's element separator into
three-character element codes and their values.
"""

from __future__ import annotations

import logging
from typing import Any

from .binary_parser import BinaryParser, ParseContext
from .models import AAMVAContainer
from .types import FIELD_CODE_LENGTH, InvalidInputTypeError

logger = logging.getLogger(__name__)

UTF8_ENCODING_TAGS = frozenset({"utf-8", "utf8"})


def _is_segment_terminator(byte: int, context: ParseContext) -> bool:
    terminator = context.parent["segmentTerminator"].encode("utf-8")
    return bool(terminator) and byte == terminator[0]


ENTRY_PARSER = (
    BinaryParser()
    .string("type", length=2)
    .int("offset", length=4)
    .int("length", length=4)
)

SUBFILE_PARSER = (
    BinaryParser()
    .string("type", length=2)
    .buffer("data", read_until=_is_segment_terminator)
)

AAMVA_PARSER = (
    BinaryParser()
    .string("compliance", length=1)
    .string("elementSeparator", length=1)
    .string("recordSeparator", length=1)
    .string("segmentTerminator", length=1)
    .string("fileType", length=5)
    .string("issuerIdentificationNumber", length=6)
    .string("aamvaVersionNumber", length=2)
    .string("jurisdictionVersionNumber", length=2)
    .int("numberOfEntries", length=2)
    .array("entries", parser=ENTRY_PARSER, length="numberOfEntries")
    .array("subfiles", parser=SUBFILE_PARSER, length="numberOfEntries")
)


class AAMVADecoder:
    """Decoder for AAMVA barcode containers."""

    @staticmethod
    def decode(data: bytes | bytearray | memoryview | str, encoding: str | None = None) -> AAMVAContainer:
        """
        Decode a raw barcode payload.

        Args:
            data: Payload bytes, or payload text tagged with ``encoding``
            encoding: Encoding tag for text input; only UTF-8 is accepted

        Returns:
            Decoded container with tokenized subfiles

        Raises:
            InvalidInputTypeError: If the input is neither bytes nor tagged UTF-8 text
            TruncatedInputError: If the payload ends inside a field or subfile
        """
        raw = AAMVADecoder._to_bytes(data, encoding)
        record, consumed = AAMVA_PARSER.parse(raw)

        separator = record["elementSeparator"]
        record["subfiles"] = [
            {
                "type": subfile["type"],
                "data": AAMVADecoder.tokenize(subfile["data"].decode("utf-8", errors="replace"), separator),
            }
            for subfile in record["subfiles"]
        ]

        logger.debug(
            "Decoded AAMVA container: %d entries, subfiles %s, %d of %d bytes consumed",
            record["numberOfEntries"],
            [subfile["type"] for subfile in record["subfiles"]],
            consumed,
            len(raw),
        )
        return AAMVAContainer.model_validate(record)

    @staticmethod
    def tokenize(payload: str, element_separator: str) -> dict[str, str]:
        """
        Split a subfile payload into element code/value pairs.

        Codes are always three characters, so each token is sliced rather
        than searched for a delimiter. Empty tokens are skipped and a
        repeated code keeps its last value.
        """
        fields: dict[str, str] = {}
        tokens = payload.split(element_separator) if element_separator else [payload]
        for token in tokens:
            if not token:
                continue
            fields[token[:FIELD_CODE_LENGTH]] = token[FIELD_CODE_LENGTH:]
        return fields

    @staticmethod
    def _to_bytes(data: Any, encoding: str | None) -> bytes:
        if isinstance(data, (bytes, bytearray, memoryview)):
            return bytes(data)
        if isinstance(data, str):
            if encoding is None or encoding.lower() not in UTF8_ENCODING_TAGS:
                msg = f"Text input must be tagged as UTF-8, got encoding {encoding!r}"
                raise InvalidInputTypeError(msg)
            return data.encode("utf-8")
        msg = f"Expected bytes or UTF-8 text, got {type(data).__name__}"
        raise InvalidInputTypeError(msg)

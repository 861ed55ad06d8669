"""
AAMVA Core Types, Constants and Exceptions.

This module defines the fundamental enumerations, the mandatory element set
and the exception hierarchy used throughout the AAMVA barcode implementation.
"""

from __future__ import annotations

from enum import Enum


class FieldKind(str, Enum):
    """Kinds of field descriptors understood by the binary parser."""
    STRING = "string"     # Fixed-length text
    INT = "int"           # Fixed-length ASCII digits
    BUFFER = "buffer"     # Byte run ended by a stop predicate
    ARRAY = "array"       # Repeated sub-record


class SubfileType(str, Enum):
    """Subfile designators that carry identity data."""
    DRIVER_LICENSE = "DL"
    ID_CARD = "ID"


class DigestAlgorithm(str, Enum):
    """Digest algorithms accepted for hashing canonical data."""
    SHA256 = "SHA-256"
    SHA384 = "SHA-384"
    SHA512 = "SHA-512"


class SelectorKind(str, Enum):
    """Forms a field selection request can take."""
    ALL = "all"
    FIELDS = "fields"
    MANDATORY = "mandatory"
    COMPONENT_INDEX = "component_index"


# AAMVA mandatory data elements, sorted by code point. Component index bit
# positions and canonical ordering both depend on this order.
MANDATORY_FIELDS: tuple[str, ...] = tuple(sorted([
    "DCA", "DCB", "DCD", "DBA", "DCS", "DAC", "DAD", "DBD", "DBB", "DBC", "DAY",
    "DAU", "DAG", "DAI", "DAJ", "DAK", "DAQ", "DCF", "DCG", "DDE", "DDF", "DDG",
]))

FIELD_CODE_LENGTH = 3


class AAMVAError(Exception):
    """Base exception for AAMVA related errors."""

    code = "AAMVAError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SchemaError(AAMVAError):
    """Exception raised when a parser schema is built or used incorrectly."""

    code = "SchemaError"


class InvalidInputTypeError(AAMVAError):
    """Exception raised when decode input is neither bytes nor tagged UTF-8 text."""

    code = "InvalidInputType"


class TruncatedInputError(AAMVAError):
    """Exception raised when the buffer ends before a field is complete."""

    code = "TruncatedInput"

    def __init__(self, message: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


class SubfileNotFoundError(AAMVAError):
    """Exception raised when no identity subfile is present."""

    code = "SubfileNotFound"


class InvalidSelectorError(AAMVAError):
    """Exception raised for a selection request of unknown shape."""

    code = "InvalidSelector"


class ConflictingSelectorError(InvalidSelectorError):
    """Exception raised when both fields and a component index are supplied."""

    code = "ConflictingSelector"


class ComponentIndexError(AAMVAError):
    """Base exception for component index encoding errors."""

    code = "ComponentIndexError"


class InvalidLengthError(ComponentIndexError):
    code = "InvalidLength"


class InvalidMultibaseHeaderError(ComponentIndexError):
    code = "InvalidMultibaseHeader"


class InvalidByteLengthError(ComponentIndexError):
    code = "InvalidByteLength"


class InvalidComponentIndexEncodingError(ComponentIndexError):
    code = "InvalidEncoding"


class IndexOutOfRangeError(ComponentIndexError):
    code = "IndexOutOfRange"


class InvalidReservedBitsError(ComponentIndexError):
    code = "InvalidReservedBits"


class DigestError(AAMVAError):
    """Exception raised during digest operations."""

    code = "DigestError"

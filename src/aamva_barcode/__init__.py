"""
AAMVA Barcode Decoding and Canonicalization.

This package decodes the AAMVA card design container carried in PDF417
barcodes on driver's licenses and ID cards, selects identity elements and
produces a byte-stable canonical form and digest of them.

Key Features:
- Schema-driven binary record parser for the AAMVA container layout
- Subfile tokenization into element code/value maps
- Element selection by explicit codes, mandatory set or component index
- Component index multibase encoding and decoding
- Canonical serialization and SHA-2 digests for privacy-preserving comparison
"""

from .api import (
    bitmask_for_ordinal,
    canonicalize,
    component_index_for_fields,
    configure_logging,
    decode,
    decode_component_index,
    detect_canonicalization_drift,
    encode_component_index,
    fields_for_component_index,
    get_processor,
    hash_base64url,
    hash_fields,
    parse,
    select,
)
from .binary_parser import BinaryParser, FieldDescriptor, ParseContext, ParseResult
from .canonicalization import AAMVACanonicalizer, CryptographyDigestProvider, DigestProvider
from .component_index import ComponentIndexCodec
from .config import AAMVASettings, get_settings
from .decoder import AAMVA_PARSER, AAMVADecoder
from .models import (
    AAMVAContainer,
    AAMVAEntry,
    AAMVASubfile,
    AllFieldsSelector,
    ComponentIndexSelector,
    FieldListSelector,
    MandatorySelector,
    resolve_selector,
)
from .processor import AAMVAProcessor
from .selection import AAMVAFieldSelector
from .types import (
    MANDATORY_FIELDS,
    AAMVAError,
    ComponentIndexError,
    ConflictingSelectorError,
    DigestAlgorithm,
    DigestError,
    FieldKind,
    IndexOutOfRangeError,
    InvalidByteLengthError,
    InvalidComponentIndexEncodingError,
    InvalidInputTypeError,
    InvalidLengthError,
    InvalidMultibaseHeaderError,
    InvalidReservedBitsError,
    InvalidSelectorError,
    SchemaError,
    SelectorKind,
    SubfileNotFoundError,
    SubfileType,
    TruncatedInputError,
)

__all__ = [
    "AAMVA_PARSER",
    "MANDATORY_FIELDS",
    "AAMVACanonicalizer",
    "AAMVAContainer",
    "AAMVADecoder",
    "AAMVAEntry",
    "AAMVAError",
    "AAMVAFieldSelector",
    "AAMVAProcessor",
    "AAMVASettings",
    "AAMVASubfile",
    "AllFieldsSelector",
    "BinaryParser",
    "ComponentIndexCodec",
    "ComponentIndexError",
    "ComponentIndexSelector",
    "ConflictingSelectorError",
    "CryptographyDigestProvider",
    "DigestAlgorithm",
    "DigestError",
    "DigestProvider",
    "FieldDescriptor",
    "FieldKind",
    "FieldListSelector",
    "IndexOutOfRangeError",
    "InvalidByteLengthError",
    "InvalidComponentIndexEncodingError",
    "InvalidInputTypeError",
    "InvalidLengthError",
    "InvalidMultibaseHeaderError",
    "InvalidReservedBitsError",
    "InvalidSelectorError",
    "MandatorySelector",
    "ParseContext",
    "ParseResult",
    "SchemaError",
    "SelectorKind",
    "SubfileNotFoundError",
    "SubfileType",
    "TruncatedInputError",
    # Convenience functions
    "bitmask_for_ordinal",
    "canonicalize",
    "component_index_for_fields",
    "configure_logging",
    "decode",
    "decode_component_index",
    "detect_canonicalization_drift",
    "encode_component_index",
    "fields_for_component_index",
    "get_processor",
    "get_settings",
    "hash_base64url",
    "hash_fields",
    "parse",
    "resolve_selector",
    "select",
]

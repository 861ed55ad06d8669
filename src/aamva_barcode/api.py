"""
Module-level convenience functions backed by a shared AAMVAProcessor.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Mapping

from .canonicalization import AAMVACanonicalizer
from .component_index import (
    bitmask_for_ordinal,
    component_index_for_fields,
    decode_component_index,
    encode_component_index,
    fields_for_component_index,
)
from .config import AAMVASettings, get_settings
from .logging_config import setup_logging
from .models import AAMVAContainer, SelectorRequest
from .processor import AAMVAProcessor

__all__ = [
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
    "hash_base64url",
    "hash_fields",
    "parse",
    "select",
]


@lru_cache
def get_processor() -> AAMVAProcessor:
    """Return a cached processor built from the environment settings."""

    return AAMVAProcessor(get_settings())


def configure_logging(settings: AAMVASettings | None = None) -> None:
    """Configure logging from settings."""
    settings = settings or get_settings()
    setup_logging(settings.service_name, settings.log_level, settings.log_format)


def decode(data: bytes | bytearray | memoryview | str, encoding: str | None = None) -> AAMVAContainer:
    return get_processor().decode(data, encoding)


def select(container: AAMVAContainer, selector: SelectorRequest = None) -> dict[str, str]:
    return get_processor().select(container, selector)


def parse(
    data: bytes | bytearray | memoryview | str,
    selector: SelectorRequest = None,
    encoding: str | None = None,
) -> dict[str, str]:
    return get_processor().parse(data, selector, encoding)


def canonicalize(fields: Mapping[str, str]) -> bytes:
    return AAMVACanonicalizer.canonicalize(fields)


async def hash_fields(fields: Mapping[str, str]) -> bytes:
    """Digest the canonical form of ``fields``."""
    return await get_processor().hash(fields)


async def hash_base64url(fields: Mapping[str, str]) -> str:
    return await get_processor().hash_base64url(fields)


detect_canonicalization_drift = AAMVACanonicalizer.detect_canonicalization_drift

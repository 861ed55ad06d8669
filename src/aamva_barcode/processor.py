"""
AAMVA Main Processor Implementation.

This module provides the processor composing the AAMVA pipeline:
raw barcode bytes -> container -> selected elements -> canonical bytes -> digest.
"""

from __future__ import annotations

import logging
from typing import Mapping

from .canonicalization import AAMVACanonicalizer, CryptographyDigestProvider, DigestProvider
from .config import AAMVASettings, get_settings
from .decoder import AAMVADecoder
from .models import AAMVAContainer, SelectorRequest
from .selection import AAMVAFieldSelector
from .types import AAMVAError

logger = logging.getLogger(__name__)


class AAMVAProcessor:
    """
    Main processor for AAMVA barcode decoding, selection and hashing.

    Holds no per-call state; one instance may be shared between callers.
    """

    def __init__(self,
                 settings: AAMVASettings | None = None,
                 digest_provider: DigestProvider | None = None) -> None:
        """
        Initialize AAMVA processor.

        Args:
            settings: Processing settings; defaults to the cached environment settings
            digest_provider: Digest service; defaults to CryptographyDigestProvider
        """
        self.settings = settings or get_settings()
        self.digest_provider = digest_provider or CryptographyDigestProvider()

    def decode(self, data: bytes | bytearray | memoryview | str, encoding: str | None = None) -> AAMVAContainer:
        """Decode a raw barcode payload into a container."""
        try:
            return AAMVADecoder.decode(data, encoding)
        except AAMVAError as e:
            logger.warning("AAMVA decode failed (%s): %s", e.code, e.message)
            raise

    def select(self, container: AAMVAContainer, selector: SelectorRequest = None) -> dict[str, str]:
        """Select elements from the container's identity subfile."""
        return AAMVAFieldSelector.select(
            container, selector, identity_types=self.settings.identity_subfile_types
        )

    def parse(
        self,
        data: bytes | bytearray | memoryview | str,
        selector: SelectorRequest = None,
        encoding: str | None = None,
    ) -> dict[str, str]:
        """
        Decode a payload and select elements in one step.

        Args:
            data: Payload bytes, or UTF-8 text tagged with ``encoding``
            selector: Selection request; ``None`` keeps every element
            encoding: Encoding tag for text input

        Returns:
            Element code to value for the selected elements
        """
        return self.select(self.decode(data, encoding), selector)

    def canonicalize(self, fields: Mapping[str, str]) -> bytes:
        return AAMVACanonicalizer.canonicalize(fields)

    async def hash(self, fields: Mapping[str, str]) -> bytes:
        """Digest the canonical form of ``fields`` with the configured algorithm."""
        return await AAMVACanonicalizer.hash(
            fields, self.digest_provider, self.settings.digest_algorithm
        )

    async def hash_base64url(self, fields: Mapping[str, str]) -> str:
        return await AAMVACanonicalizer.hash_base64url(
            fields, self.digest_provider, self.settings.digest_algorithm
        )

    def digest(self, fields: Mapping[str, str]) -> bytes:
        return AAMVACanonicalizer.digest(fields, self.settings.digest_algorithm)

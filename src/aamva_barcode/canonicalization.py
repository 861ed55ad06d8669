"""
AAMVA Canonicalization and Digest Implementation.

This module implements the canonical form of a selected element set:
- each element rendered as its three-character code followed by its value
- entries sorted by code point (byte-wise on the UTF-8 encoding)
- entries joined by newlines, with a trailing newline
- UTF-8 encoded

The digest of the canonical form is computed through a DigestProvider. The
default provider uses ``cryptography`` hash primitives.
"""

from __future__ import annotations

import base64
import logging
from typing import Mapping, Protocol

from cryptography.hazmat.primitives import hashes

from .types import FIELD_CODE_LENGTH, DigestAlgorithm, DigestError

logger = logging.getLogger(__name__)

CANONICAL_ENTRY_SEPARATOR = "\n"

_HASH_ALGORITHMS = {
    DigestAlgorithm.SHA256: hashes.SHA256,
    DigestAlgorithm.SHA384: hashes.SHA384,
    DigestAlgorithm.SHA512: hashes.SHA512,
}


class DigestProvider(Protocol):
    """Digest service used to hash canonical bytes."""

    async def digest(self, algorithm: DigestAlgorithm, data: bytes) -> bytes:
        ...


def compute_digest(algorithm: DigestAlgorithm | str, data: bytes) -> bytes:
    """Compute a digest synchronously with ``cryptography``."""
    try:
        algorithm = DigestAlgorithm(algorithm)
    except ValueError as e:
        msg = f"Unsupported digest algorithm: {algorithm}"
        raise DigestError(msg) from e

    hasher = hashes.Hash(_HASH_ALGORITHMS[algorithm]())
    hasher.update(data)
    return hasher.finalize()


class CryptographyDigestProvider:
    """Digest provider backed by ``cryptography`` hash primitives."""

    async def digest(self, algorithm: DigestAlgorithm, data: bytes) -> bytes:
        return compute_digest(algorithm, data)


class AAMVACanonicalizer:
    """
    AAMVA canonicalization engine.

    Provides byte-stable serialization of element maps and their digests.
    """

    @staticmethod
    def canonicalize(fields: Mapping[str, str]) -> bytes:
        """
        Create the canonical byte form of an element map.

        Args:
            fields: Element code to value

        Returns:
            UTF-8 bytes of the sorted, newline-terminated entries
        """
        entries = sorted(f"{code}{value}".encode("utf-8") for code, value in fields.items())
        separator = CANONICAL_ENTRY_SEPARATOR.encode("utf-8")
        return separator.join(entries) + separator

    @staticmethod
    async def hash(
        fields: Mapping[str, str],
        provider: DigestProvider | None = None,
        algorithm: DigestAlgorithm = DigestAlgorithm.SHA256,
    ) -> bytes:
        """
        Hash the canonical form of an element map.

        Args:
            fields: Element code to value
            provider: Digest service; defaults to CryptographyDigestProvider
            algorithm: Digest algorithm

        Returns:
            Raw digest bytes
        """
        canonical = AAMVACanonicalizer.canonicalize(fields)
        provider = provider or CryptographyDigestProvider()
        digest = await provider.digest(algorithm, canonical)
        logger.debug("Computed %s digest over %d canonical bytes", DigestAlgorithm(algorithm).value, len(canonical))
        return digest

    @staticmethod
    def digest(
        fields: Mapping[str, str],
        algorithm: DigestAlgorithm = DigestAlgorithm.SHA256,
    ) -> bytes:
        """Hash the canonical form of an element map without an event loop."""
        return compute_digest(algorithm, AAMVACanonicalizer.canonicalize(fields))

    @staticmethod
    async def hash_base64url(
        fields: Mapping[str, str],
        provider: DigestProvider | None = None,
        algorithm: DigestAlgorithm = DigestAlgorithm.SHA256,
    ) -> str:
        """Hash the canonical form and return it as unpadded base64url text."""
        digest = await AAMVACanonicalizer.hash(fields, provider, algorithm)
        return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")

    @staticmethod
    def detect_canonicalization_drift(
        original_canonical: bytes,
        new_fields: Mapping[str, str],
    ) -> list[str]:
        """
        Detect canonicalization drift between an original canonical form and new data.

        Args:
            original_canonical: Original canonical bytes
            new_fields: Element map to compare

        Returns:
            List of drift errors (empty if no drift)
        """
        new_canonical = AAMVACanonicalizer.canonicalize(new_fields)
        if original_canonical == new_canonical:
            return []

        errors = ["Canonicalization drift detected: original != new"]
        separator = CANONICAL_ENTRY_SEPARATOR.encode("utf-8")
        original_codes = {entry[:FIELD_CODE_LENGTH] for entry in original_canonical.split(separator) if entry}
        new_codes = {entry[:FIELD_CODE_LENGTH] for entry in new_canonical.split(separator) if entry}
        for code in sorted(original_codes - new_codes):
            errors.append(f"Element {code.decode('utf-8', errors='replace')} missing from new data")
        for code in sorted(new_codes - original_codes):
            errors.append(f"Element {code.decode('utf-8', errors='replace')} not in original data")
        return errors

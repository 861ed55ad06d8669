"""
Field selection over decoded AAMVA containers.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .models import AAMVAContainer, SelectorRequest, resolve_selector
from .types import SubfileNotFoundError, SubfileType

logger = logging.getLogger(__name__)

IDENTITY_SUBFILE_TYPES: tuple[str, ...] = (
    SubfileType.DRIVER_LICENSE.value,
    SubfileType.ID_CARD.value,
)


class AAMVAFieldSelector:
    """Select element subsets from a container's identity subfile."""

    @staticmethod
    def select(
        container: AAMVAContainer,
        selector: SelectorRequest = None,
        identity_types: Iterable[str] = IDENTITY_SUBFILE_TYPES,
    ) -> dict[str, str]:
        """
        Select fields from the first DL or ID subfile.

        Args:
            container: Decoded container
            selector: Selection request; ``None`` keeps every element present
            identity_types: Subfile designators treated as identity subfiles

        Returns:
            Element code to value for the kept elements

        Raises:
            SubfileNotFoundError: If the container has no identity subfile
            ConflictingSelectorError: If fields and a component index are both given
        """
        resolved = resolve_selector(selector)

        identity_types = tuple(identity_types)
        subfile = container.identity_subfile(identity_types)
        if subfile is None:
            msg = (
                f"No identity subfile ({', '.join(identity_types)}) in container; "
                f"found {[s.type for s in container.subfiles]}"
            )
            raise SubfileNotFoundError(msg)

        selected = {code: value for code, value in subfile.data.items() if resolved.keeps(code)}
        logger.debug(
            "Selected %d of %d elements from %s subfile using %s selector",
            len(selected),
            len(subfile.data),
            subfile.type,
            resolved.kind.value,
        )
        return selected

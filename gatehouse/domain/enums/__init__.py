"""Domain enums package."""

from gatehouse.domain.enums.access_block_reason import AccessBlockReason

__all__ = ["AccessBlockReason"]

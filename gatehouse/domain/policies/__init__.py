"""Pure domain policies (no I/O)."""

from gatehouse.domain.policies.access_gate import (
    DEFAULT_OPTIONS,
    AccessGateOptions,
    PrincipalState,
    block_reason_message,
    decide,
)

__all__ = [
    "AccessGateOptions",
    "DEFAULT_OPTIONS",
    "PrincipalState",
    "block_reason_message",
    "decide",
]

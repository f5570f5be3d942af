"""Centralized constants for internal implementation details.

These are fixed properties of the engine, NOT deployment configuration. For
tunables (token lifetimes, bcrypt cost, requirement flags) use
``gatehouse.core.config`` instead.
"""

# =============================================================================
# Token Lengths
# =============================================================================

TOKEN_BYTES: int = 32
"""Number of random bytes behind every generated secret (32 bytes = 256 bits)."""

BCRYPT_ROUNDS_DEFAULT: int = 12
"""Default bcrypt work factor (cost parameter)."""

BCRYPT_MAX_PASSWORD_BYTES: int = 72
"""bcrypt only reads the first 72 bytes of its input."""


# =============================================================================
# Refresh Token Ledger
# =============================================================================

REFRESH_TOKEN_SCAN_LIMIT_DEFAULT: int = 50
"""Most-recent unrevoked refresh tokens hash-compared per lookup."""


# =============================================================================
# Roles
# =============================================================================

ADMIN_ROLE: str = "ADMIN"
"""Reserved system role. Always exists and can never be deleted."""

LEGACY_ADMIN_ALIAS: str = "ADMINISTRATOR"
"""Legacy spelling accepted as an alias of ADMIN_ROLE."""


# =============================================================================
# Prefixes
# =============================================================================

BEARER_PREFIX: str = "Bearer "
"""HTTP Authorization header prefix for Bearer tokens."""

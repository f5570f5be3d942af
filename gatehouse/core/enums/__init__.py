"""Core enums package.

Usage:
    from gatehouse.core.enums import ErrorCode
"""

from gatehouse.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode"]

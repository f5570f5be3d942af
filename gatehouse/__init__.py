"""Gatehouse: embeddable identity and access control engine.

Authenticates credentials, issues and rotates session tokens, runs the
password reset and email verification lifecycles, and resolves role-based
access decisions over a host application's principals.
"""

from gatehouse.core.config import GatehouseSettings
from gatehouse.core.container import Services, build_services
from gatehouse.core.result import Failure, Result, Success

__version__ = "0.1.0"

__all__ = [
    "Failure",
    "GatehouseSettings",
    "Result",
    "Services",
    "Success",
    "build_services",
]

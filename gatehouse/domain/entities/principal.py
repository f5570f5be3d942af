"""Principal domain entity.

The Principal is the host application's user identity. The host owns it; the
engine only reads its id, email and display name, and creates one at
registration when the host has none for that email.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass
class Principal:
    """Host-owned user identity.

    Attributes:
        id: Opaque unique identifier.
        email: Normalized email (trimmed, lowercase).
        first_name: Optional display first name.
        last_name: Optional display last name.
    """

    id: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None

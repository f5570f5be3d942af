"""Domain entities."""

from gatehouse.domain.entities.credential_record import CredentialRecord
from gatehouse.domain.entities.principal import Principal
from gatehouse.domain.entities.role import Role

__all__ = ["CredentialRecord", "Principal", "Role"]

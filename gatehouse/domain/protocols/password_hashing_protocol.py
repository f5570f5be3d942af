"""Credential hashing protocol for domain layer.

One-way, salted, deliberately slow hashing. The same port hashes passwords
and refresh-token secrets, so a leaked refresh-token ledger resists offline
brute force just like the password table.

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (BcryptCredentialHasher)
"""

from typing import Protocol


class CredentialHasherProtocol(Protocol):
    """Secret hashing and verification interface.

    Implementations:
        - BcryptCredentialHasher: bcrypt with configurable cost factor

    Usage:
        digest = hasher.hash("SecurePass123")
        hasher.verify("SecurePass123", digest)  # True
    """

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext secret.

        Non-deterministic: every call embeds a fresh random salt.

        Args:
            plaintext: Secret to hash.

        Returns:
            Digest string safe to persist.
        """
        ...

    def verify(self, plaintext: str, digest: str) -> bool:
        """Verify a plaintext secret against a digest.

        Never raises for well-formed input: a mismatch or an unparseable
        digest returns False.

        Args:
            plaintext: Secret presented by the caller.
            digest: Digest from storage.

        Returns:
            True if the secret matches the digest, False otherwise.
        """
        ...

"""Port for the identity/credential collaborator"""
from typing import Protocol

from src.core.models import CredentialClaims


class CredentialVerifier(Protocol):
    """Interface for verifying bearer credentials"""

    def verify(self, token: str) -> CredentialClaims:
        """
        Verify a bearer credential

        Args:
            token (str): Raw bearer token

        Returns:
            CredentialClaims: Caller identity and expiry

        Raises:
            AuthError: reason 'invalid' for unknown/forged tokens, 'expired' past expiry
        """
        ...

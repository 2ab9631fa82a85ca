"""Identity provider port.

Registration, login and token refresh live with the hosted auth service.
The storefront only needs to turn a bearer token into a user id.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class InvalidTokenError(Exception):
    """The bearer token is missing, malformed, expired or not ours."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str | None = None
    full_name: str | None = None


class IdentityProvider(ABC):
    @abstractmethod
    def verify_token(self, token: str) -> TokenClaims:
        """Return the claims carried by ``token`` or raise InvalidTokenError."""
        ...

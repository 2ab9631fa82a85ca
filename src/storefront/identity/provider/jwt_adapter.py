"""Verifies access tokens issued by the hosted auth service.

Tokens are HS256 JWTs signed with the project's shared secret; ``sub`` is the
user id and ``user_metadata.full_name`` the name given at registration.
"""

import jwt

from storefront.identity.provider.port import IdentityProvider, InvalidTokenError, TokenClaims


class JwtIdentityProvider(IdentityProvider):
    def __init__(self, secret: str, audience: str | None = "authenticated", algorithms=("HS256",)) -> None:
        if not secret:
            raise ValueError("JWT secret is required")
        self.secret = secret
        self.audience = audience
        self.algorithms = list(algorithms)

    def verify_token(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                options={"require": ["sub", "exp"], "verify_aud": self.audience is not None},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token expired") from None
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(f"Invalid token: {exc}") from None

        metadata = payload.get("user_metadata") or {}
        return TokenClaims(
            user_id=str(payload["sub"]),
            email=payload.get("email"),
            full_name=metadata.get("full_name"),
        )

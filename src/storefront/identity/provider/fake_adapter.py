"""In-memory identity provider for development, tests and load tests.

Tokens are registered up front; ``dev-<user id>`` tokens are accepted
without registration when ``accept_dev_tokens`` is on.
"""

from collections import deque

from storefront.identity.provider.port import IdentityProvider, InvalidTokenError, TokenClaims

DEV_TOKEN_PREFIX = "dev-"
RECORDED_CALLS = 100


class FakeIdentityProvider(IdentityProvider):
    def __init__(self, accept_dev_tokens: bool = True) -> None:
        self.accept_dev_tokens = accept_dev_tokens
        self.tokens: dict[str, TokenClaims] = {}
        # Most recent verified tokens, newest last
        self.calls: deque[str] = deque(maxlen=RECORDED_CALLS)

    def register(self, token: str, user_id: str, email: str | None = None, full_name: str | None = None) -> TokenClaims:
        claims = TokenClaims(user_id=user_id, email=email, full_name=full_name)
        self.tokens[token] = claims
        return claims

    def revoke(self, token: str) -> None:
        self.tokens.pop(token, None)

    def verify_token(self, token: str) -> TokenClaims:
        self.calls.append(token)
        if token in self.tokens:
            return self.tokens[token]
        if self.accept_dev_tokens and token.startswith(DEV_TOKEN_PREFIX) and len(token) > len(DEV_TOKEN_PREFIX):
            user_id = token[len(DEV_TOKEN_PREFIX) :]
            return TokenClaims(user_id=user_id, email=f"{user_id}@example.test")
        raise InvalidTokenError("Unknown token")

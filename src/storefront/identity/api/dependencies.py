"""FastAPI dependencies that authenticate and authorize callers."""

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.identity.caller import Caller, resolve_caller
from storefront.identity.provider import InvalidTokenError
from storefront.utils.logging import bind_request_context

bearer = HTTPBearer(auto_error=False)


def _authenticate(credentials: HTTPAuthorizationCredentials | None) -> Caller | None:
    if credentials is None or not credentials.credentials:
        return None
    try:
        caller = resolve_caller(credentials.credentials)
    except InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from None
    bind_request_context(user_id=caller.user_id)
    return caller


async def get_current_caller(credentials: HTTPAuthorizationCredentials | None = Depends(bearer)) -> Caller:
    caller = _authenticate(credentials)
    if caller is None:
        raise HTTPException(status_code=401, detail="Access token required")
    return caller


async def get_optional_caller(credentials: HTTPAuthorizationCredentials | None = Depends(bearer)) -> Caller | None:
    """Like get_current_caller, but anonymous requests pass through as ``None``."""
    return _authenticate(credentials)


async def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return caller

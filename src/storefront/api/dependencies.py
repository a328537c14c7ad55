"""FastAPI dependencies resolving the caller from a bearer token."""

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.auth import Principal, get_token_issuer
from storefront.auth.port import InvalidToken
from storefront.utils.logging import bind_request_context

_bearer = HTTPBearer(auto_error=False)


async def current_member(credentials: HTTPAuthorizationCredentials | None = Depends(_bearer)) -> Principal:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Missing access token", headers={"WWW-Authenticate": "Bearer"})

    try:
        principal = get_token_issuer().verify(credentials.credentials)
    except InvalidToken:
        raise HTTPException(
            status_code=401, detail="Invalid or expired access token", headers={"WWW-Authenticate": "Bearer"}
        ) from None

    bind_request_context(member_id=principal.member_id)
    return principal


async def require_admin(principal: Principal = Depends(current_member)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return principal

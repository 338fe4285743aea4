# tripchat/api/deps.py
from fastapi import Header, HTTPException, Request, status
from tripchat.core.pubsub import Broadcaster
from tripchat.core.security import decode_access_token
from tripchat.schemas.auth import TokenClaims
from tripchat.services.credentials import CredentialStore
from tripchat.services.groups import GroupStore

async def get_current_claims(
    authorization: str | None = Header(default=None),
) -> TokenClaims:
    """
    FastAPI dependency guarding protected routes.

    Extracts the bearer token from the Authorization header and verifies its
    signature and expiry. The database is not consulted: the decoded claims
    are the caller's identity.

    Returns:
        TokenClaims: user_id and email of the authenticated caller

    Raises:
        HTTPException (401): No header, a scheme other than Bearer, or an empty token (AUTH_REQUIRED)
        HTTPException (403): Token is malformed, badly signed or expired (AUTH_INVALID_TOKEN)

    Usage:
        @router.get("/protected")
        async def protected_route(claims: TokenClaims = Depends(get_current_claims)):
            return {"email": claims.email}
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "AUTH_REQUIRED", "message": "Unauthorized. No token provided."},
        )

    try:
        payload = decode_access_token(token)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "AUTH_INVALID_TOKEN", "message": "Invalid or expired token"},
        )
    return TokenClaims(user_id=str(payload["sub"]), email=str(payload["email"]))

# -------- application collaborators (created in main.create_app) --------
def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credentials

def get_group_store(request: Request) -> GroupStore:
    return request.app.state.groups

def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster

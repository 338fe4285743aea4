# tripchat/api/routers/auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from tripchat.api.deps import get_credential_store, get_current_claims
from tripchat.core.security import create_access_token
from tripchat.schemas.auth import LoginRequest, RegisterIn, TokenClaims
from tripchat.services.credentials import (
    CredentialStore,
    DuplicateEmailError,
    InvalidPasswordError,
    UserNotFoundError,
)

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn, store: CredentialStore = Depends(get_credential_store)):
    """
    Register a new user account.

    The email is lowercased before it is checked and stored, so "A@x.com"
    and "a@x.com" are the same account. The password is hashed before storage.

    Returns:
        dict: message and the public user fields (201)

    Error codes:
        - EMAIL_EXISTS (400): Email already registered
        - BAD_REQUEST (400): Missing or blank fields
        - REGISTER_FAILED (500): Unexpected store failure
    """
    try:
        user = await store.register(body.name, body.email, body.password)
    except DuplicateEmailError:
        logger.info("[auth] registration rejected, email in use: %s", body.email.lower())
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail={"code": "EMAIL_EXISTS", "message": "Email already in use"})
    except Exception:
        logger.exception("[auth] registration failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail={"code": "REGISTER_FAILED", "message": "Error registering user"})
    return {"message": "User registered successfully!", "user": user.to_public()}

@router.post("/login")
async def login(payload: LoginRequest, store: CredentialStore = Depends(get_credential_store)):
    """
    Authenticate user and issue an access token.

    Returns:
        dict: message and a bearer token valid for one hour

    Error codes:
        - USER_NOT_FOUND (400): No account with this email
        - INVALID_PASSWORD (400): Wrong password
        - LOGIN_FAILED (500): Unexpected store failure
    """
    try:
        user = await store.authenticate(payload.email, payload.password)
    except UserNotFoundError:
        logger.info("[auth] login for unknown email: %s", payload.email.lower())
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail={"code": "USER_NOT_FOUND", "message": "User not found"})
    except InvalidPasswordError:
        logger.info("[auth] invalid password for: %s", payload.email.lower())
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail={"code": "INVALID_PASSWORD", "message": "Invalid password"})
    except Exception:
        logger.exception("[auth] login failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail={"code": "LOGIN_FAILED", "message": "Server error during login"})
    token = create_access_token(str(user.id), user.email)
    logger.info("[auth] login ok: %s", user.email)
    return {"message": "Login successful", "token": token}

@router.get("/user")
async def current_user(
    claims: TokenClaims = Depends(get_current_claims),
    store: CredentialStore = Depends(get_credential_store),
):
    """
    Get the authenticated user's account (without the password hash).

    Raises:
        HTTPException (401/403): Missing or invalid token
        HTTPException (404): The account behind the token no longer exists
    """
    try:
        user = await store.find_by_id(claims.user_id)
    except Exception:
        logger.exception("[auth] user lookup failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail={"code": "SERVER_ERROR", "message": "Server error"})
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail={"code": "USER_NOT_FOUND", "message": "User not found"})
    return user.to_public()

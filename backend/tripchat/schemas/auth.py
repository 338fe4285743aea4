# tripchat/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request models for registration and login, and the decoded token claims.
"""
from pydantic import BaseModel, constr

class RegisterIn(BaseModel):
    """
    Request model for user registration.
    Email is normalized (trimmed, lowercased) by the credential store.
    """
    name: constr(strip_whitespace=True, min_length=1, max_length=256)
    email: constr(strip_whitespace=True, min_length=1, max_length=256)
    password: constr(min_length=1)  # Plain text, hashed server-side; no policy beyond non-empty

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    """
    email: constr(strip_whitespace=True, min_length=1, max_length=256)
    password: str

class TokenClaims(BaseModel):
    """
    Identity asserted by a verified access token.
    Attached to every protected request by the access-control dependency.
    """
    user_id: str
    email: str

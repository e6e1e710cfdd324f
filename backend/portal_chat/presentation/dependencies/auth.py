"""
Authentication Dependency for FastAPI.

- Extracts and validates the portal JWT (HS256) from the Authorization header
  or, for websockets, from the token query parameter
- Returns the caller's identity {employee_id, role}
- Raises HTTPException 401 if unauthorized

Config needed (from portal_chat.config.settings):
- SERVICE_AUTH_SECRET
- SERVICE_AUTH_ISSUER (optional)
- SERVICE_AUTH_AUDIENCE (optional)
"""

import jwt
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from portal_chat.config.settings import Config
from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.domain.value_objects.role import Role


class InvalidIdentityError(Exception):
    """Token missing, unverifiable, or without an employee id."""


@dataclass
class AuthUser:
    employee_id: EmployeeId
    role: Optional[Role] = None


security = HTTPBearer(auto_error=False)


def decode_identity(token: Optional[str]) -> AuthUser:
    """Verify a portal token and extract the identity claims."""
    if not token:
        raise InvalidIdentityError("No auth token")

    options = {"require": ["exp", "iat"]}
    kwargs = {}
    if Config.SERVICE_AUTH_AUDIENCE:
        kwargs["audience"] = Config.SERVICE_AUTH_AUDIENCE
    else:
        options["verify_aud"] = False
    if Config.SERVICE_AUTH_ISSUER:
        kwargs["issuer"] = Config.SERVICE_AUTH_ISSUER

    try:
        claims = jwt.decode(
            token,
            Config.SERVICE_AUTH_SECRET,
            algorithms=["HS256"],
            options=options,
            **kwargs,
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidIdentityError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidIdentityError(f"Invalid token: {str(e)}") from e

    employee_id = claims.get("employeeId")
    if not employee_id:
        raise InvalidIdentityError("Missing required claims in token")

    try:
        return AuthUser(
            employee_id=EmployeeId(str(employee_id)),
            role=Role.parse(claims.get("role")),
        )
    except ValueError as e:
        raise InvalidIdentityError("Invalid employee id in token") from e


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """
    Extract and validate user from JWT token.

    Raises:
        HTTPException 401 if token is invalid, expired, or missing required claims
    """
    try:
        return decode_identity(credentials.credentials if credentials else None)
    except InvalidIdentityError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

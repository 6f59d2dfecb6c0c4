"""Portal bearer token validation.

Tokens are issued by the portal's login flow and signed with a shared secret;
this service only verifies them and reads the identity claims.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

logger = logging.getLogger("portal_auth")

_ROLE_PREFIX = "ROLE_"


def validate_token(
    token: str,
    secret_key: str,
    *,
    algorithm: str = "HS256",
    issuer: str | None = None,
    audience: str | None = None,
) -> dict[str, Any]:
    if not secret_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Missing token signing configuration",
        )

    options = {
        "verify_signature": True,
        "verify_aud": audience is not None,
        "verify_iss": issuer is not None,
        "verify_exp": True,
        "require_exp": True,
        "require_sub": True,
    }

    try:
        return jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm],
            audience=audience,
            issuer=issuer,
            options=options,
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is expired",
        ) from e
    except JWTClaimsError as e:
        logger.info("Token claims rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {e}",
        ) from e
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        ) from e


def extract_roles_from_token(payload: dict[str, Any]) -> list[str]:
    """Role claim values, normalized so ``ROLE_ADMIN`` and ``ADMIN`` compare equal."""
    roles = payload.get("roles", [])
    if not isinstance(roles, list):
        return []
    return [str(r).upper().removeprefix(_ROLE_PREFIX) for r in roles if isinstance(r, str)]

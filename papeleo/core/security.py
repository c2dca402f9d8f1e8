from typing import Any

import jwt

from papeleo.core.config import settings


def decode_token(token: str) -> dict[str, Any] | None:
    """Decode and verify an access token issued by the auth provider."""
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
        )
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None

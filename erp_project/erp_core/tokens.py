from datetime import datetime, timedelta, timezone

from django.conf import settings
from jose import JWTError, jwt

from .exceptions import InvalidToken

JWT_ALGORITHM = "HS256"


def issue_token(user, now=None) -> str:
    """Sign a token carrying the user's id, tenant, email and role."""
    now = now or datetime.now(timezone.utc)
    expire = now + timedelta(hours=settings.JWT_EXPIRE_HOURS)
    claims = {
        "user_id": user.pk,
        "tenant_id": user.tenant_id,
        "email": user.email,
        "role": user.role,
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> dict:
    """Return the claims of a valid token; raise InvalidToken otherwise."""
    try:
        # only HS256 is accepted; "none" or RS* headers fail here
        claims = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc
    if claims.get("tenant_id") is None or claims.get("user_id") is None:
        raise InvalidToken("token is missing tenant or user claims")
    return claims


def extract_bearer_token(header_value) -> str:
    """'Bearer <token>' -> '<token>'; anything else -> ''."""
    parts = (header_value or "").split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return ""

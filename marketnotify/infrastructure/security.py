"""Bearer token helpers.

Tokens are issued by the account service; this module only needs to read the
recipient identity (``sub``) and role out of them. ``create_access_token`` is
kept for scripts and tests.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from marketnotify.config import get_settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(tz=timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode(
        {**data, "exp": expire},
        settings.secret_key,
        algorithm=settings.access_token_algorithm,
    )


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(
            token, settings.secret_key, algorithms=[settings.access_token_algorithm]
        )
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc

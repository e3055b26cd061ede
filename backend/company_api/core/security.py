from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from company_api.core.errors import ConfigError, InvalidTokenError

SIGNING_ALGORITHM = "HS256"
# Só a família HMAC é aceita no verify (evita algorithm confusion: none/RS*/ES*)
ACCEPTED_ALGORITHMS = ["HS256", "HS384", "HS512"]
REQUIRED_CLAIMS = ["sub", "iat", "exp"]

DEFAULT_TOKEN_TTL = timedelta(hours=1)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        # hash malformado / esquema desconhecido => falha fechada
        return False


@dataclass(frozen=True)
class Claims:
    sub: str
    iat: int
    exp: int

    @property
    def issued_at(self) -> datetime:
        return datetime.fromtimestamp(self.iat, tz=timezone.utc)

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)


def _require_secret(secret: str) -> str:
    if not secret:
        raise ConfigError("jwt secret is required")
    return secret


def issue_token(
    subject: str,
    secret: str,
    ttl: timedelta = DEFAULT_TOKEN_TTL,
    *,
    now: datetime | None = None,
) -> str:
    """
    Emite um JWT HS256 para `subject`.

    `iat`/`exp` são timestamps inteiros; `exp` = `iat` + ttl.
    `now` existe para testes (tokens já expirados).
    """
    key = _require_secret(secret)
    issued = now or datetime.now(timezone.utc)
    iat = int(issued.timestamp())
    payload: Dict[str, Any] = {
        "sub": subject,
        "iat": iat,
        "exp": iat + int(ttl.total_seconds()),
    }
    return jwt.encode(payload, key, algorithm=SIGNING_ALGORITHM)


def verify_token(token: str, secret: str) -> Claims:
    key = _require_secret(secret)
    try:
        payload = jwt.decode(
            token,
            key,
            algorithms=ACCEPTED_ALGORITHMS,
            options={"require": REQUIRED_CLAIMS},
        )
        return Claims(sub=str(payload["sub"]), iat=int(payload["iat"]), exp=int(payload["exp"]))
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("token expired")
    except jwt.PyJWTError as e:
        raise InvalidTokenError(str(e))
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError(f"malformed claims: {e}")

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 30
MAX_BCRYPT_BYTES = 72  # bcrypt limit


class TokenError(Exception):
    """Base for every reason a bearer token is rejected."""


class MalformedToken(TokenError):
    pass


class InvalidSignature(TokenError):
    pass


class TokenExpired(TokenError):
    pass


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    role: str


def hash_password(password: str) -> str:
    p = password.encode("utf-8")[:MAX_BCRYPT_BYTES]
    return bcrypt.hashpw(p, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    p = plain.encode("utf-8")[:MAX_BCRYPT_BYTES]
    return bcrypt.checkpw(p, hashed.encode("utf-8"))


def create_access_token(
    subject_id: int,
    role: str,
    secret: str,
    expire_days: int = ACCESS_TOKEN_EXPIRE_DAYS,
    issued_at: datetime | None = None,
) -> str:
    """Signs a token asserting identity and role as of now; nothing is stored server side."""
    iat = issued_at or datetime.now(timezone.utc)
    to_encode = {
        "sub": str(subject_id),
        "role": role,
        "iat": iat,
        "exp": iat + timedelta(days=expire_days),
    }
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify_access_token(token: str, secret: str) -> TokenClaims:
    """
    Checks structure, signature and expiry, in that order.

    Raises MalformedToken, InvalidSignature or TokenExpired. The role in the
    returned claims is the issuance-time snapshot; current permissions must be
    read from the admin record.
    """
    try:
        jwt.get_unverified_claims(token)
    except JWTError as e:
        raise MalformedToken(str(e)) from e
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpired("Token has expired") from e
    except JWTError as e:
        raise InvalidSignature(str(e)) from e

    sub = payload.get("sub")
    role = payload.get("role")
    if not sub or not role:
        raise MalformedToken("Token is missing required claims")
    try:
        subject_id = int(sub)
    except (TypeError, ValueError) as e:
        raise MalformedToken("Token subject is not an id") from e
    return TokenClaims(subject_id=subject_id, role=role)

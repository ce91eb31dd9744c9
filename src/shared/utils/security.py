"""
Credential Primitives

bcrypt password hashing (passlib) and HS256 JWTs (PyJWT).

- Passwords are hashed with a per-hash random salt at cost 10.
- Access and refresh tokens use different secrets, so neither verifies as
  the other.
- Every token carries a random `jti`: two tokens minted for the same user
  in the same second still differ, which rotation depends on.

Usage:
======
    from src.shared.utils.security import SecurityUtils

    stored = SecurityUtils.hash_password("secret123")
    SecurityUtils.verify_password("secret123", stored)  # True

    token = SecurityUtils.create_token({"id": user_id}, secret, timedelta(days=10))
    claims = SecurityUtils.decode_token(token, secret)
"""

import hmac
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext


BCRYPT_ROUNDS = 10

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


class SecurityUtils:
    """Stateless helpers; secrets and lifetimes are passed in by TokenService."""

    @staticmethod
    def hash_password(password: str) -> str:
        """Salted bcrypt hash, e.g. "$2b$10$..."."""
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def create_token(
        data: dict,
        secret_key: str,
        expires_delta: timedelta,
        algorithm: str = "HS256",
    ) -> str:
        """
        Sign `data` as a JWT.

        Adds the standard `exp` and `iat` claims plus a random `jti`.
        """
        issued_at = datetime.now(timezone.utc)
        claims = {
            **data,
            "exp": issued_at + expires_delta,
            "iat": issued_at,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(claims, secret_key, algorithm=algorithm)

    @staticmethod
    def decode_token(
        token: str,
        secret_key: str,
        algorithm: str = "HS256",
    ) -> dict:
        """
        Verify signature and expiry, then return the claims.

        Raises:
            ValueError: "Token has expired" or "Invalid token: <reason>"
        """
        try:
            return jwt.decode(token, secret_key, algorithms=[algorithm])
        except jwt.ExpiredSignatureError as e:
            raise ValueError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise ValueError(f"Invalid token: {e}") from e

    @staticmethod
    def tokens_match(presented: str, stored: Optional[str]) -> bool:
        """Constant-time comparison; nothing matches a missing stored token."""
        if not stored:
            return False
        return hmac.compare_digest(presented.encode("utf-8"), stored.encode("utf-8"))

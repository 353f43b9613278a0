import logging
import time
from typing import Any, Dict

import bcrypt
import jwt

from common.exception.exceptions import UnauthorizedAccessException

logger = logging.getLogger(__name__)


class AuthService:
    """
    Issues and verifies HS256 bearer tokens and checks bcrypt password hashes.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: int = 24 * 60 * 60):
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    # -----------------------
    # Tokens
    # -----------------------

    def issue_token(self, user: Dict[str, Any]) -> str:
        now = int(time.time())
        claims = {
            "userId": user["id"],
            "isAdmin": bool(user.get("isAdmin", False)),
            "iat": now,
            "exp": now + self._expires_in,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Returns the verified claims, raising UnauthorizedAccessException for any
        invalid, tampered or expired token.
        """
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedAccessException("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected token: {e}")
            raise UnauthorizedAccessException("Invalid token")

    # -----------------------
    # Passwords
    # -----------------------

    @staticmethod
    def hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def check_password(password: str, password_hash: str) -> bool:
        if not password or not password_hash:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

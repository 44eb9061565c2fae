"""Token service for issuing and validating JWT identity tokens."""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
from jose import JWTError, jws, jwt
from jose.exceptions import ExpiredSignatureError, JWSError

from config import Settings
from exceptions import TokenExpiredError, TokenMalformedError, TokenSignatureError
from schemas.auth import TokenClaims

logger = logging.getLogger(__name__)


class TokenService:
    """
    Issues and validates signed identity tokens.

    The signing key, algorithm, issuer and lifetime come from the settings the
    service is constructed with and never change afterwards.
    """

    def __init__(self, settings: Settings):
        self._secret = settings.secret_key
        self._algorithm = settings.jwt_algorithm
        self._issuer = settings.jwt_issuer
        self._lifetime = timedelta(hours=settings.access_token_expire_hours)

    def issue(self, subject_id: int, role: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a token for ``subject_id`` carrying ``role``."""
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self._lifetime)

        to_encode = {
            "sub": str(subject_id),
            "role": role,
            "iss": self._issuer,
            "iat": now,
            "exp": expire,
        }

        return jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

    def validate(self, token: str) -> TokenClaims:
        """
        Validate a token and return the identity it carries.

        The signature is checked before any claim is trusted.

        Raises:
            TokenMalformedError: not a JWT, or required claims missing/invalid
            TokenSignatureError: signature does not match the signing key
            TokenExpiredError: signature is valid but ``exp`` has passed
        """
        try:
            jwt.get_unverified_header(token)
        except JWTError as e:
            raise TokenMalformedError() from e

        try:
            jws.verify(token, self._secret, algorithms=[self._algorithm])
        except JWSError as e:
            raise TokenSignatureError() from e

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require_exp": True, "require_sub": True, "require_iss": True},
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except JWTError as e:
            logger.debug(f"Token claims rejected: {e}")
            raise TokenMalformedError() from e

        role = payload.get("role")
        if not isinstance(role, str) or not role:
            raise TokenMalformedError()

        try:
            subject_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise TokenMalformedError() from e

        return TokenClaims(subject_id=subject_id, role=role)

"""Application error taxonomy.

Every error carries the private numeric code rendered in the response body
(4xxxx for client errors, 5xxxx for server/upstream/store errors) and the
HTTP status it maps to.
"""
from typing import Optional


class AppError(Exception):
    """Base class for errors rendered as ``{code, result}`` responses."""

    status_code = 500
    code = 50000
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    @property
    def result(self):
        """Body of the ``result`` field in the error response."""
        return self.message


class ValidationError(AppError):
    status_code = 400
    code = 40000
    message = "Invalid request parameters"


class DuplicateError(AppError):
    status_code = 400
    code = 40002
    message = "User with this email already exists"


class NotFoundError(AppError):
    # served as 400, not 404
    status_code = 400
    code = 40005
    message = "user not found"


class InvalidCredentialsError(AppError):
    status_code = 400
    code = 40006
    message = "incorrect password or email"


class AuthError(AppError):
    status_code = 401
    code = 40100
    message = "unauthorized"


class OwnershipError(AuthError):
    code = 40101


class TokenExpiredError(AuthError):
    code = 40102
    message = "token expired"


class TokenSignatureError(AuthError):
    code = 40103
    message = "invalid token signature"


class TokenMalformedError(AuthError):
    code = 40104
    message = "malformed token"


class RoleError(AuthError):
    code = 40105


class PasswordHashError(AppError):
    code = 50000
    message = "Failed to hash password"


class StoreError(AppError):
    code = 50001
    message = "Database error"


class UpstreamTransportError(AppError):
    code = 50003
    message = "Failed to call external API"


class UpstreamError(AppError):
    """
    The provider answered with a non-zero envelope code.

    The response carries the fixed code 50200; the provider's own code and msg
    are relayed inside ``result``.
    """

    status_code = 502
    code = 50200

    def __init__(self, upstream_code: int, message: str):
        self.upstream_code = upstream_code
        super().__init__(message=message)

    @property
    def result(self):
        return {"upstream_code": self.upstream_code, "msg": self.message}

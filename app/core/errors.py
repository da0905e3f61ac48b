from fastapi import status


class StorefrontError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Request failed."
    headers: dict[str, str] | None = None

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class AuthenticationFailure(StorefrontError):
    """Bad username or password at login. Never says which one."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid credentials"


class AuthorizationFailure(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authorized"
    headers = {"WWW-Authenticate": "Bearer"}


class MissingToken(AuthorizationFailure):
    detail = "Not authorized, no token"


class InvalidToken(AuthorizationFailure):
    detail = "Not authorized, token failed"


class IdentityNotFound(AuthorizationFailure):
    detail = "Not authorized, user not found"


class PermissionDenied(StorefrontError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Access denied"


class ValidationFailure(StorefrontError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Invalid request."


class NotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class Conflict(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Already exists"

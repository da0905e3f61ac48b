from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    username: str
    role: str
    permissions: dict[str, bool]
    token: str
    token_type: str = "bearer"


class CurrentAdminResponse(BaseModel):
    """Identity as re-resolved from the database on this request."""
    id: int
    username: str
    role: str
    permissions: dict[str, bool]
    effective_permissions: dict[str, bool]

"""Session and identity schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UserIdentity(BaseModel):
    """Authenticated user as reported by the data service."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    display_name: str | None = None


class AuthSession(BaseModel):
    """An active session: the bearer token and the user it belongs to."""

    access_token: str
    user: UserIdentity


class SignInRequest(BaseModel):
    """Development sign-in payload (local store only)."""

    email: str = Field(..., min_length=3, max_length=320)
    display_name: str | None = Field(None, max_length=100)


class RedirectOut(BaseModel):
    redirect_to: str

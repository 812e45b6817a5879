"""Bearer-token authentication seam.

Token verification lives outside this service: the app holds an identity resolver
(token -> user or None) on ``app.state.identity_resolver`` and the dependencies
below only parse the header and enforce the admin flag.
"""

from typing import Callable, Dict, Optional

from fastapi import Depends, Header, Request
from pydantic import BaseModel, Field

from .errors import NotAuthenticatedError, NotAuthorizedError


class CurrentUser(BaseModel):
    id: str = Field(..., description="Stable user identifier")
    name: str = Field(..., description="Display name, copied onto reviews")
    is_admin: bool = Field(False, description="Whether the user may manage products")


IdentityResolver = Callable[[str], Optional[CurrentUser]]


def static_token_resolver(tokens: Dict[str, dict]) -> IdentityResolver:
    """Resolve tokens against a fixed table, e.g. ``settings.API_TOKENS``."""
    users = {token: CurrentUser(**info) for token, info in tokens.items()}

    def resolve(token: str) -> Optional[CurrentUser]:
        return users.get(token)

    return resolve


def get_identity_resolver(request: Request) -> IdentityResolver:
    return request.app.state.identity_resolver


def get_current_user(
    authorization: Optional[str] = Header(None),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> CurrentUser:
    if not authorization or not authorization.startswith("Bearer "):
        raise NotAuthenticatedError("Not authorized, no token")
    token = authorization[len("Bearer ") :].strip()
    if not token:
        raise NotAuthenticatedError("Not authorized, no token")
    user = resolver(token)
    if user is None:
        raise NotAuthenticatedError("Not authorized, token failed")
    return user


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise NotAuthorizedError("Not authorized as an admin")
    return user

# afyalink/auth/dependencies.py

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from afyalink.auth.auth_service import decode_access_token
from afyalink.auth.schemas import TokenClaims
from afyalink.common.utils.exceptions import AuthenticationError, AuthorizationError
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.models.models import UserRole

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    """
    Dependency to decode the JWT provided in the Authorization header.

    A missing token is a 401; a token that fails verification is a 403.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(GlobalMessages.TOKEN_MISSING)
    return decode_access_token(credentials.credentials)


def require_roles(*roles: UserRole) -> Callable:
    """Build a dependency that only lets callers with one of `roles` through."""
    allowed = frozenset(roles)

    async def role_checker(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if claims.role not in allowed:
            raise AuthorizationError(
                f"User role '{claims.role.value}' is not authorized to access this route."
            )
        return claims

    return role_checker


# Role sets shared by the routers
ALL_STAFF = (UserRole.ADMIN, UserRole.DOCTOR, UserRole.NURSE, UserRole.RECEPTIONIST)
CLINICAL_STAFF = (UserRole.ADMIN, UserRole.DOCTOR, UserRole.NURSE)
FRONT_DESK = (UserRole.ADMIN, UserRole.RECEPTIONIST)
NOTE_AUTHORS = (UserRole.ADMIN, UserRole.DOCTOR)

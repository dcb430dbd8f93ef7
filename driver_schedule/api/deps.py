from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from driver_schedule.domain.models import Caller, UserRole
from driver_schedule.domain.permissions import has_permission
from driver_schedule.infra.auth import decode_access_token
from driver_schedule.infra.container import Container
from driver_schedule.services.identity_service import AuthError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/identity/dev-login")


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_current_claims(
    request: Request,
    token: str = Depends(oauth2_scheme),
) -> dict[str, Any]:
    try:
        claims = decode_access_token(token)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from exc
    request.state.claims = claims
    return claims


def get_caller(
    claims: Annotated[dict[str, Any], Depends(get_current_claims)],
    container: Annotated[Container, Depends(get_container)],
) -> Caller:
    try:
        user_id = int(claims["sub"])
        role = UserRole(claims["role"])
        return container.identity.caller_for(user_id, role)
    except (KeyError, ValueError, AuthError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from exc


def require_perm(permission: str) -> Callable[[dict[str, Any]], dict[str, Any]]:
    def _checker(
        claims: Annotated[dict[str, Any], Depends(get_current_claims)],
    ) -> dict[str, Any]:
        if not has_permission(claims, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission: {permission}",
            )
        return claims

    return _checker

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from driver_schedule.api.deps import get_caller, get_container, require_perm
from driver_schedule.domain.models import Caller, DevLoginRequest, TokenResponse, UserRead
from driver_schedule.domain.permissions import PERM_DIRECTORY_READ
from driver_schedule.infra.auth import create_access_token
from driver_schedule.infra.container import Container
from driver_schedule.services.identity_service import AuthError, IdentityService

router = APIRouter()


def get_identity_service(container: Annotated[Container, Depends(get_container)]) -> IdentityService:
    return container.identity


CurrentCaller = Annotated[Caller, Depends(get_caller)]
Service = Annotated[IdentityService, Depends(get_identity_service)]


def _handle_identity_error(exc: Exception) -> None:
    if isinstance(exc, AuthError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    raise exc


@router.post("/dev-login", response_model=TokenResponse)
def dev_login(payload: DevLoginRequest, service: Service) -> TokenResponse:
    try:
        user, permissions = service.dev_login(payload.user_id)
    except AuthError as exc:
        _handle_identity_error(exc)
        raise
    token = create_access_token(user_id=user.id, role=user.role, permissions=permissions)
    return TokenResponse(access_token=token, role=user.role, permissions=permissions)


@router.get("/me", response_model=UserRead)
def me(caller: CurrentCaller, service: Service) -> UserRead:
    try:
        return UserRead.model_validate(service.get_user(caller.id))
    except AuthError as exc:
        _handle_identity_error(exc)
        raise


@router.get(
    "/drivers",
    response_model=list[UserRead],
    dependencies=[Depends(require_perm(PERM_DIRECTORY_READ))],
)
def list_drivers(service: Service) -> list[UserRead]:
    return [UserRead.model_validate(user) for user in service.list_drivers()]

"""
FastAPI router for user directory endpoints.

Fixed paths (/active, /search, /count, /username/..., /email/...) are declared
before /{user_id} so they are never captured by the id route.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from . import schemas, service
from .dependencies import get_user_store
from .entity import User
from .errors import UserConflictError, UserNotFoundError
from .repository import UserStore

router = APIRouter(prefix="/api/users")


def _to_user_response(user: User) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user.id),
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        active=user.active,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _found_or_404(user: User | None) -> schemas.UserResponse:
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return _to_user_response(user)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=schemas.UserResponse)
async def create_user(
    payload: schemas.UserCreateRequest,
    store: UserStore = Depends(get_user_store),
) -> schemas.UserResponse:
    try:
        user = await service.create_user(store, payload.to_user())
    except UserConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _to_user_response(user)


@router.get("", response_model=list[schemas.UserResponse])
async def get_all_users(store: UserStore = Depends(get_user_store)) -> list[schemas.UserResponse]:
    return [_to_user_response(u) for u in await service.get_all_users(store)]


@router.get("/active", response_model=list[schemas.UserResponse])
async def get_active_users(store: UserStore = Depends(get_user_store)) -> list[schemas.UserResponse]:
    return [_to_user_response(u) for u in await service.get_active_users(store)]


@router.get("/search", response_model=list[schemas.UserResponse])
async def search_users_by_first_name(
    first_name: str = Query(default="", alias="firstName", max_length=100),
    store: UserStore = Depends(get_user_store),
) -> list[schemas.UserResponse]:
    """
    Case-insensitive first-name search; an empty query matches every user with a first name.
    """
    users = await service.search_users_by_first_name(store, first_name)
    return [_to_user_response(u) for u in users]


@router.get("/count", response_model=schemas.UserCountResponse)
async def get_user_count(
    active: bool = Query(...),
    store: UserStore = Depends(get_user_store),
) -> schemas.UserCountResponse:
    count = await service.get_user_count_by_status(store, active)
    return schemas.UserCountResponse(active=active, count=count)


@router.get("/username/{username}", response_model=schemas.UserResponse)
async def get_user_by_username(
    username: str,
    store: UserStore = Depends(get_user_store),
) -> schemas.UserResponse:
    return _found_or_404(await service.get_user_by_username(store, username))


@router.get("/email/{email}", response_model=schemas.UserResponse)
async def get_user_by_email(
    email: str,
    store: UserStore = Depends(get_user_store),
) -> schemas.UserResponse:
    return _found_or_404(await service.get_user_by_email(store, email))


@router.get("/{user_id}", response_model=schemas.UserResponse)
async def get_user_by_id(
    user_id: int,
    store: UserStore = Depends(get_user_store),
) -> schemas.UserResponse:
    return _found_or_404(await service.get_user_by_id(store, user_id))


@router.put("/{user_id}", response_model=schemas.UserResponse)
async def update_user(
    user_id: int,
    payload: schemas.UserUpdateRequest,
    store: UserStore = Depends(get_user_store),
) -> schemas.UserResponse:
    try:
        user = await service.update_user(store, user_id, payload.to_user())
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except UserConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _to_user_response(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    store: UserStore = Depends(get_user_store),
) -> Response:
    try:
        await service.delete_user(store, user_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{user_id}/activate", response_model=schemas.UserResponse)
async def activate_user(
    user_id: int,
    store: UserStore = Depends(get_user_store),
) -> schemas.UserResponse:
    try:
        user = await service.activate_user(store, user_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _to_user_response(user)


@router.patch("/{user_id}/deactivate", response_model=schemas.UserResponse)
async def deactivate_user(
    user_id: int,
    store: UserStore = Depends(get_user_store),
) -> schemas.UserResponse:
    try:
        user = await service.deactivate_user(store, user_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _to_user_response(user)

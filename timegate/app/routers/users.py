"""User registry endpoints. Writes pass through the business-hours gate."""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from ..deps import db_session, principal, write_guard
from ..domain.models import UserCreate, UserRead, UserUpdate
from ..services.guard import WriteGuard
from ..services.registry import UserStore

router = APIRouter()


def _store(
    session: Session = Depends(db_session),
    guard: WriteGuard = Depends(write_guard),
) -> UserStore:
    return UserStore(session, guard)


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    store: UserStore = Depends(_store),
    actor: str = Depends(principal),
):
    return store.create(payload, actor)


@router.get("/", response_model=List[UserRead])
def list_users(store: UserStore = Depends(_store)):
    return store.list()


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, store: UserStore = Depends(_store)):
    return store.get(user_id)


@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdate,
    store: UserStore = Depends(_store),
    actor: str = Depends(principal),
):
    return store.update(user_id, payload, actor)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    store: UserStore = Depends(_store),
    actor: str = Depends(principal),
):
    store.delete(user_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

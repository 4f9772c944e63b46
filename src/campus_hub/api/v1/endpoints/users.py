# src/campus_hub/api/v1/endpoints/users.py
"""User profile endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, raise_http, run_write
from campus_hub.models import User
from campus_hub.schemas.user import (
    NotificationPreferencesUpdate,
    ProfileUpdate,
    SkillRequest,
    UserResponse,
)
from campus_hub.services import users as user_service
from campus_hub.services.account_cleanup import schedule_account_deletion
from campus_hub.services.errors import CampusError

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: CurrentUserDep) -> User:
    """Return the authenticated user's profile."""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    changes: ProfileUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> User:
    """Update the authenticated user's profile."""
    user = run_write(
        db,
        lambda: user_service.update_profile(
            db, current_user, changes.model_dump(exclude_unset=True)
        ),
    )
    db.refresh(user)
    return user


@router.post("/me/skills", response_model=list[str])
async def add_skill(body: SkillRequest, current_user: CurrentUserDep, db: SessionDep) -> list[str]:
    return run_write(db, lambda: user_service.add_skill(db, current_user, body.skill))


@router.delete("/me/skills/{skill}", response_model=list[str])
async def remove_skill(skill: str, current_user: CurrentUserDep, db: SessionDep) -> list[str]:
    return run_write(db, lambda: user_service.remove_skill(db, current_user, skill))


@router.put("/me/notification-preferences", response_model=dict[str, bool])
async def update_preferences(
    body: NotificationPreferencesUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, bool]:
    """Switch notification types on or off."""
    return run_write(
        db,
        lambda: user_service.update_notification_preferences(
            db, current_user, body.model_dump(exclude_unset=True)
        ),
    )


@router.post("/me/onboarding", response_model=UserResponse)
async def complete_onboarding(current_user: CurrentUserDep, db: SessionDep) -> User:
    user = run_write(db, lambda: user_service.complete_onboarding(db, current_user))
    db.refresh(user)
    return user


@router.delete("/me", status_code=status.HTTP_202_ACCEPTED)
async def delete_me(current_user: CurrentUserDep, db: SessionDep) -> dict[str, str]:
    """Schedule deletion of the authenticated user's account."""
    run_write(db, lambda: schedule_account_deletion(db, current_user))
    return {"status": "scheduled"}


@router.get("/", response_model=list[UserResponse])
async def search_users(
    db: SessionDep,
    q: str | None = None,
    role: str | None = None,
    skills: Annotated[list[str] | None, Query()] = None,
    limit: int = Query(default=user_service.SEARCH_LIMIT, ge=1, le=100),
) -> list[User]:
    """Search users by name, role and skills."""
    try:
        return user_service.search_users(db, q, role, skills, limit)
    except CampusError as exc:
        raise_http(exc)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: SessionDep) -> User:
    try:
        return user_service.get_user(db, user_id)
    except CampusError as exc:
        raise_http(exc)

# src/campus_hub/api/v1/endpoints/notifications.py
"""Notification inbox endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, raise_http, run_write
from campus_hub.models import Notification
from campus_hub.schemas.engagement import NotificationPage, NotificationResponse
from campus_hub.services import notifications as notification_service
from campus_hub.services.errors import CampusError

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationPage)
async def list_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    filter: str = "all",
    limit: int = Query(default=notification_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
    cursor: str | None = None,
) -> dict[str, Any]:
    """Page through notifications; ``filter`` is all, unread or a type."""
    try:
        return notification_service.list_notifications(
            db, current_user, filter=filter, limit=limit, cursor=cursor
        )
    except CampusError as exc:
        raise_http(exc)


@router.get("/recent", response_model=list[NotificationResponse])
async def recent(current_user: CurrentUserDep, db: SessionDep) -> list[Notification]:
    return notification_service.get_recent_notifications(db, current_user)


@router.get("/unread-count")
async def unread_count(current_user: CurrentUserDep, db: SessionDep) -> dict[str, int]:
    return {"count": notification_service.get_unread_count(db, current_user)}


@router.post("/read-all")
async def mark_all_read(current_user: CurrentUserDep, db: SessionDep) -> dict[str, int]:
    updated = run_write(db, lambda: notification_service.mark_all_as_read(db, current_user))
    return {"updated": updated}


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int, current_user: CurrentUserDep, db: SessionDep
) -> Notification:
    notification = run_write(
        db, lambda: notification_service.mark_as_read(db, current_user, notification_id)
    )
    db.refresh(notification)
    return notification


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int, current_user: CurrentUserDep, db: SessionDep
) -> None:
    run_write(
        db, lambda: notification_service.delete_notification(db, current_user, notification_id)
    )

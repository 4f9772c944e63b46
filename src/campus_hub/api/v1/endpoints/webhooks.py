# src/campus_hub/api/v1/endpoints/webhooks.py
"""Identity provider webhook receiver."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy.orm import Session
from svix.webhooks import Webhook, WebhookVerificationError

from campus_hub.api.v1.dependencies import SessionDep, run_write
from campus_hub.core.settings import settings
from campus_hub.services import users as user_service
from campus_hub.services.account_cleanup import schedule_account_deletion

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/identity")
async def identity_webhook(request: Request, db: SessionDep) -> dict[str, Any]:
    """Mirror user lifecycle events from the identity provider.

    Handles ``user.created``, ``user.updated`` and ``user.deleted``; other
    event types are acknowledged and ignored.
    """
    secret = settings.identity_webhook_secret
    if not secret:
        logger.error("IDENTITY_WEBHOOK_SECRET is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook secret not configured",
        )

    msg_id = request.headers.get("svix-id")
    timestamp = request.headers.get("svix-timestamp")
    signature = request.headers.get("svix-signature")
    if not msg_id or not timestamp or not signature:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing webhook headers",
        )

    body = await request.body()
    headers = {"svix-id": msg_id, "svix-timestamp": timestamp, "svix-signature": signature}
    try:
        payload = Webhook(secret).verify(body, headers)
    except (WebhookVerificationError, ValueError) as err:
        logger.warning("Rejected webhook %s: %s", msg_id, err)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid webhook signature",
        ) from err

    event_type = payload.get("type")
    data = payload.get("data") or {}
    if event_type in ("user.created", "user.updated", "user.deleted") and not data.get("id"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook payload is missing the user id",
        )

    run_write(db, lambda: _apply_event(db, event_type, data))
    return {"success": True, "type": event_type}


def _apply_event(db: Session, event_type: str | None, data: dict[str, Any]) -> None:
    if event_type == "user.created":
        user_service.create_user_from_webhook(db, user_service.profile_fields_from_event(data))
    elif event_type == "user.updated":
        user_service.update_user_from_webhook(db, user_service.profile_fields_from_event(data))
    elif event_type == "user.deleted":
        user = user_service.get_user_by_external_id(db, data["id"])
        if user is not None:
            schedule_account_deletion(db, user)
    else:
        logger.info("Ignoring webhook event type %s", event_type)

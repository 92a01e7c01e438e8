"""Push subscription endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from findingsweetie.core.config import Settings
from findingsweetie.core.deps import get_current_user, get_settings
from findingsweetie.db.session import get_db
from findingsweetie.models.user import User
from findingsweetie.schemas.push import SubscribeRequest, SubscribeResponse, UnsubscribeRequest, VapidKeyResponse
from findingsweetie.services.push_service import subscribe, unsubscribe

router = APIRouter(prefix="/push", tags=["push"])


@router.get("/vapid-public-key", response_model=VapidKeyResponse)
def vapid_public_key(settings: Settings = Depends(get_settings)):
    """Public key browsers need to create a subscription."""
    return VapidKeyResponse(publicKey=settings.vapid_public_key)


@router.post("/subscribe", response_model=SubscribeResponse)
def post_subscribe(
    data: SubscribeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Store the browser's push subscription for the current user."""
    sub = data.subscription
    stored, created = subscribe(
        db,
        current_user.id,
        endpoint=sub.endpoint,
        p256dh=sub.keys.p256dh,
        auth=sub.keys.auth,
        user_agent=sub.userAgent,
    )
    return SubscribeResponse(id=stored.id, already_subscribed=not created)


@router.post("/unsubscribe")
def post_unsubscribe(
    data: UnsubscribeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Drop the current user's subscription for an endpoint."""
    removed = unsubscribe(db, current_user.id, data.endpoint)
    return {"success": True, "removed": removed}

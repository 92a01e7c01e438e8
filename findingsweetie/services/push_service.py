"""Push subscription storage. Delivery is handled elsewhere."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from findingsweetie.models.push_subscription import PushSubscription

logger = logging.getLogger(__name__)


def get_subscription(db: Session, endpoint: str) -> PushSubscription | None:
    return db.execute(select(PushSubscription).where(PushSubscription.endpoint == endpoint)).scalar_one_or_none()


def subscribe(
    db: Session,
    user_id: int,
    endpoint: str,
    p256dh: str,
    auth: str,
    user_agent: str | None = None,
) -> tuple[PushSubscription, bool]:
    """Store a subscription. Returns (subscription, created)."""
    existing = get_subscription(db, endpoint)
    if existing:
        logger.info("User id=%s already subscribed to push", user_id)
        return existing, False

    sub = PushSubscription(
        user_id=user_id,
        endpoint=endpoint,
        keys_p256dh=p256dh,
        keys_auth=auth,
        user_agent=user_agent,
    )
    db.add(sub)
    db.commit()
    db.refresh(sub)
    logger.info("Push subscription created for user id=%s", user_id)
    return sub, True


def unsubscribe(db: Session, user_id: int, endpoint: str) -> int:
    """Remove the caller's subscription for an endpoint. Returns rows removed."""
    result = db.execute(
        delete(PushSubscription)
        .where(PushSubscription.endpoint == endpoint)
        .where(PushSubscription.user_id == user_id)
    )
    db.commit()
    logger.info("Push subscription removed for user id=%s", user_id)
    return result.rowcount


def list_subscriptions(db: Session, user_id: int) -> list[PushSubscription]:
    result = db.execute(
        select(PushSubscription)
        .where(PushSubscription.user_id == user_id)
        .order_by(PushSubscription.created_at.desc(), PushSubscription.id.desc())
    )
    return list(result.scalars().all())

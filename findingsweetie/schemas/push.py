"""Push subscription schemas."""

from pydantic import BaseModel, Field


class SubscriptionKeys(BaseModel):
    p256dh: str
    auth: str


class Subscription(BaseModel):
    endpoint: str = Field(min_length=1)
    keys: SubscriptionKeys
    userAgent: str | None = None


class SubscribeRequest(BaseModel):
    subscription: Subscription


class UnsubscribeRequest(BaseModel):
    endpoint: str = Field(min_length=1)


class SubscribeResponse(BaseModel):
    success: bool = True
    already_subscribed: bool = False
    id: int


class VapidKeyResponse(BaseModel):
    publicKey: str

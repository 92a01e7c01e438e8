"""Push subscription tests."""

from findingsweetie.services.push_service import list_subscriptions, subscribe, unsubscribe

PASSWORD = "Secret123"


def _register_and_login(client, email):
    client.post("/api/auth/register", json={"email": email, "password": PASSWORD, "zip_code": "12345"})
    return client.post("/api/auth/login", json={"email": email, "password": PASSWORD}).json()["access_token"]


def _subscription(endpoint="https://push.example.com/abc"):
    return {
        "subscription": {
            "endpoint": endpoint,
            "keys": {"p256dh": "p256dh-key", "auth": "auth-secret"},
            "userAgent": "pytest",
        }
    }


def test_vapid_public_key(client):
    r = client.get("/api/push/vapid-public-key")
    assert r.status_code == 200
    assert r.json() == {"publicKey": "test-vapid-public-key"}


def test_subscribe_requires_auth(client):
    assert client.post("/api/push/subscribe", json=_subscription()).status_code == 401


def test_subscribe_is_idempotent(client):
    tok = _register_and_login(client, "push@test.com")
    headers = {"Authorization": f"Bearer {tok}"}

    first = client.post("/api/push/subscribe", headers=headers, json=_subscription())
    assert first.status_code == 200
    assert first.json()["already_subscribed"] is False

    second = client.post("/api/push/subscribe", headers=headers, json=_subscription())
    assert second.json()["already_subscribed"] is True
    assert second.json()["id"] == first.json()["id"]


def test_unsubscribe(client):
    tok = _register_and_login(client, "unsub@test.com")
    headers = {"Authorization": f"Bearer {tok}"}
    client.post("/api/push/subscribe", headers=headers, json=_subscription())

    r = client.post("/api/push/unsubscribe", headers=headers, json={"endpoint": "https://push.example.com/abc"})
    assert r.status_code == 200
    assert r.json()["removed"] == 1

    again = client.post("/api/push/unsubscribe", headers=headers, json={"endpoint": "https://push.example.com/abc"})
    assert again.json()["removed"] == 0


def test_unsubscribe_only_touches_own_subscription(db, make_user):
    owner = make_user()
    other = make_user()
    subscribe(db, owner.id, "https://push.example.com/mine", "k", "a")

    assert unsubscribe(db, other.id, "https://push.example.com/mine") == 0
    assert [s.endpoint for s in list_subscriptions(db, owner.id)] == ["https://push.example.com/mine"]


def test_subscriptions_removed_with_user(db, make_user):
    user = make_user()
    subscribe(db, user.id, "https://push.example.com/gone", "k", "a")
    user_id = user.id

    db.delete(user)
    db.commit()
    assert list_subscriptions(db, user_id) == []

"""Profile, password and dashboard tests."""

PASSWORD = "Secret123"


def _register_and_login(client, email, zip_code="12345", **extra):
    client.post(
        "/api/auth/register",
        json={"email": email, "password": PASSWORD, "zip_code": zip_code, **extra},
    )
    return client.post("/api/auth/login", json={"email": email, "password": PASSWORD}).json()["access_token"]


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_get_profile(client):
    tok = _register_and_login(client, "profile@test.com", zip_code="54321")
    r = client.get("/api/user/profile", headers=_auth(tok))
    assert r.status_code == 200
    assert r.json()["email"] == "profile@test.com"
    assert r.json()["zip_code"] == "54321"


def test_partial_profile_update_keeps_other_fields(client):
    """PUT /api/user/profile only touches supplied fields."""
    tok = _register_and_login(client, "partial@test.com", mobile_number="5550001111")
    r = client.put("/api/user/profile", headers=_auth(tok), json={"flag_sms_notification": True})
    assert r.status_code == 200
    data = r.json()
    assert data["flag_sms_notification"] is True
    assert data["mobile_number"] == "5550001111"
    assert data["zip_code"] == "12345"
    assert data["email"] == "partial@test.com"


def test_profile_email_conflict(client):
    _register_and_login(client, "taken@test.com")
    tok = _register_and_login(client, "mover@test.com")
    r = client.put("/api/user/profile", headers=_auth(tok), json={"email": "Taken@test.com"})
    assert r.status_code == 409


def test_profile_email_change(client):
    tok = _register_and_login(client, "old@test.com")
    r = client.put("/api/user/profile", headers=_auth(tok), json={"email": "new@test.com"})
    assert r.status_code == 200
    login = client.post("/api/auth/login", json={"email": "new@test.com", "password": PASSWORD})
    assert login.status_code == 200


def test_profile_requires_auth(client):
    assert client.get("/api/user/profile").status_code == 401


def test_change_password(client):
    tok = _register_and_login(client, "pw@test.com")
    r = client.post(
        "/api/user/change-password",
        headers=_auth(tok),
        json={"current_password": PASSWORD, "new_password": "NewSecret456"},
    )
    assert r.status_code == 200

    old = client.post("/api/auth/login", json={"email": "pw@test.com", "password": PASSWORD})
    assert old.status_code == 401
    new = client.post("/api/auth/login", json={"email": "pw@test.com", "password": "NewSecret456"})
    assert new.status_code == 200


def test_change_password_wrong_current(client):
    tok = _register_and_login(client, "pw2@test.com")
    r = client.post(
        "/api/user/change-password",
        headers=_auth(tok),
        json={"current_password": "Nope12345", "new_password": "NewSecret456"},
    )
    assert r.status_code == 401


def test_change_password_too_short(client):
    tok = _register_and_login(client, "pw3@test.com")
    r = client.post(
        "/api/user/change-password",
        headers=_auth(tok),
        json={"current_password": PASSWORD, "new_password": "short"},
    )
    assert r.status_code == 400


def test_dashboard_lists_inactive_reports_newest_first(client):
    """GET /api/user/pets includes inactive reports and their images."""
    tok = _register_and_login(client, "dash@test.com")
    first = client.post(
        "/api/pets/register",
        headers=_auth(tok),
        json={"status": "Lost", "pet_type": "Dog", "images": ["/a.jpg", "/b.jpg"]},
    ).json()
    second = client.post(
        "/api/pets/register",
        headers=_auth(tok),
        json={"status": "Found", "pet_type": "Cat", "is_active": False},
    ).json()

    other = _register_and_login(client, "other@test.com")
    client.post("/api/pets/register", headers=_auth(other), json={"status": "Lost", "pet_type": "Bird"})

    r = client.get("/api/user/pets", headers=_auth(tok))
    assert r.status_code == 200
    data = r.json()
    assert data["count"] == 2
    assert [p["id"] for p in data["pets"]] == [second["id"], first["id"]]
    assert data["pets"][0]["is_active"] is False
    images = data["pets"][1]["images"]
    assert [i["image_url"] for i in images] == ["/a.jpg", "/b.jpg"]
    assert images[0]["is_primary"] is True

from models import Admin


def test_login_success(client, admin):
    res = client.post("/api/auth/login", json={"email": admin["email"], "password": admin["password"]})

    assert res.status_code == 200
    assert res.json() == {"success": True, "email": admin["email"], "name": admin["name"]}


def test_wrong_password_and_unknown_email_look_the_same(client, admin):
    wrong_password = client.post("/api/auth/login", json={"email": admin["email"], "password": "nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "who@example.com", "password": admin["password"]})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid credentials"}


def test_unhashed_stored_password_is_rejected(client, store):
    session = store.session()
    try:
        session.add(Admin(id="a1", email="plain@example.com", password="plaintext", name="Plain"))
        session.commit()
    finally:
        session.close()

    res = client.post("/api/auth/login", json={"email": "plain@example.com", "password": "plaintext"})

    assert res.status_code == 401

import pytest
from fastapi.testclient import TestClient

import repository
from database import Store
from main import create_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret-pass"
ADMIN_NAME = "Shop Admin"


# ── One fresh SQLite file per test ───────────────────────────
@pytest.fixture
def store(tmp_path):
    s = Store(f"sqlite:///{tmp_path / 'shop.db'}")
    yield s
    s.close()


@pytest.fixture
def client(store):
    app = create_app(store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin(client, store):
    session = store.session()
    try:
        repository.seed_admin(session, ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME)
    finally:
        session.close()
    return {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD, "name": ADMIN_NAME}

import os
from typing import Dict, Optional
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, declarative_base
import config

# ── Base class ───────────────────────────────────────────────
# All models inherit from this
Base = declarative_base()


# ── Additive migrations ──────────────────────────────────────
# Columns added after the first release. Each one must be nullable or
# carry a DEFAULT so rows written by older versions stay well-formed.
# Never remove or reorder entries: they are re-run on every start.
MIGRATIONS = [
    "ALTER TABLE products ADD COLUMN isFeatured INTEGER DEFAULT 0",
    "ALTER TABLE products ADD COLUMN status TEXT DEFAULT 'in_stock'",
    "ALTER TABLE products ADD COLUMN estimatedDelivery TEXT",
    "ALTER TABLE categories ADD COLUMN slug TEXT",
    "ALTER TABLE packages ADD COLUMN shippingRoute TEXT DEFAULT 'sea'",
]


def _is_duplicate_column(exc: OperationalError) -> bool:
    return "duplicate column" in str(exc.orig).lower()


def _ensure_sqlite_dir(url: str):
    """Create the parent folder of a file-backed SQLite database."""
    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return
    path = parsed.database
    if not path or path == ":memory:":
        return
    folder = os.path.dirname(os.path.abspath(path))
    os.makedirs(folder, exist_ok=True)


# ============================================================
# Store — owns the engine, the schema and the session factory
# ============================================================
# One Store per process: built at startup, closed at shutdown.
# Tests build one per test against a temporary file.
# ============================================================
class Store:

    def __init__(self, url: str = config.DATABASE_URL):
        self.url = url
        _ensure_sqlite_dir(url)

        # check_same_thread=False is required for SQLite + FastAPI
        # because requests may be handled on different threads
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine = create_engine(url, connect_args=connect_args)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    def session(self):
        return self.SessionLocal()

    def initialize(
            self,
            default_settings: Optional[Dict[str, str]] = None,
            admin_email: Optional[str] = None,
            admin_password: Optional[str] = None,
            admin_name: Optional[str] = None
    ):
        """
        Bring the database up to the latest shape. Safe to call any number of times.

        1. CREATE TABLE IF NOT EXISTS for every model
        2. ALTER TABLE ... ADD COLUMN for columns added later
           ("duplicate column" means it already ran, anything else is raised)
        3. Insert-if-absent seeding of settings and the bootstrap admin
        """
        # import models so classes register to Base
        import models  # noqa: F401
        from repository import seed_settings, seed_admin

        Base.metadata.create_all(bind=self.engine)
        self.migrate()

        if default_settings is None:
            default_settings = config.DEFAULT_SETTINGS
        if admin_email is None:
            admin_email = config.ADMIN_EMAIL
        if admin_password is None:
            admin_password = config.ADMIN_PASSWORD
        if admin_name is None:
            admin_name = config.ADMIN_NAME

        db = self.session()
        try:
            seed_settings(db, default_settings)
            if admin_email and admin_password:
                seed_admin(db, admin_email, admin_password, admin_name)
        finally:
            db.close()

    def migrate(self):
        for statement in MIGRATIONS:
            try:
                with self.engine.begin() as conn:
                    conn.execute(text(statement))
            except OperationalError as exc:
                if not _is_duplicate_column(exc):
                    raise

    def close(self):
        self.engine.dispose()


# ── Helper: get a DB session (FastAPI dependency) ────────────
def get_db(request: Request):
    db = request.app.state.store.session()
    try:
        yield db
    finally:
        db.close()

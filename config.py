import os

# ── Database ──────────────────────────────────────────────────
# Any SQLAlchemy SQLite URL works; the default keeps the file under ./data
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/database.db")

# ── Server ────────────────────────────────────────────────────
PORT = int(os.getenv("PORT", "3001"))
VERCEL = os.getenv("VERCEL")

# Comma-separated list, "*" allows everything
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# ── Bootstrap admin ───────────────────────────────────────────
# Inserted on first boot only when both email and password are set
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Admin")

# ── Store settings (seeded into the settings table) ───────────
STORE_NAME = os.getenv("STORE_NAME", "My Shop")
STORE_CURRENCY = os.getenv("STORE_CURRENCY", "USD")
STORE_CONTACT_EMAIL = os.getenv("STORE_CONTACT_EMAIL", "")


def get_default_settings():
    """Return the key/value pairs written to the settings table on first boot."""
    return {
        "storeName": STORE_NAME,
        "currency": STORE_CURRENCY,
        "contactEmail": STORE_CONTACT_EMAIL,
    }


DEFAULT_SETTINGS = get_default_settings()

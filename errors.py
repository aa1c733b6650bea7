# ============================================================
# errors.py — Domain errors raised by the repository
# ============================================================
# Every error carries the message sent back as {"error": ...}
# and the HTTP status the handler boundary maps it to.
# ============================================================


class ShopError(Exception):
    """Base class for all repository errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ShopError):
    """No row for a by-id / by-key lookup."""
    status_code = 404


class Conflict(ShopError):
    """Unique constraint violated (category name, tracking id, admin email)."""
    status_code = 400


class InvalidCredentials(ShopError):
    status_code = 401


class StorageFailure(ShopError):
    """Anything else the database complained about."""
    status_code = 500

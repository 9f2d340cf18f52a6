import logging
import threading

from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Malformed hashes never match."""
    try:
        return check_password_hash(hashed, password)
    except (TypeError, ValueError):
        return False


class AdminAuth:
    """
    Admin credential store. Only password hashes are kept; used to gate
    fleet administration, never consulted by the reservation engine.
    """

    def __init__(self):
        self._hashes: dict[str, str] = {}
        self._rw = threading.RLock()

    def add_admin(self, admin_id: str, password: str) -> None:
        admin_id = (admin_id or "").strip()
        if not admin_id or not password:
            raise ValueError("Admin id and password are required")
        with self._rw:
            self._hashes[admin_id] = hash_password(password)
        logger.info("Admin account '%s' registered", admin_id)

    def has_admin(self, admin_id: str) -> bool:
        return admin_id in self._hashes

    def authenticate(self, admin_id: str, password: str) -> bool:
        hashed = self._hashes.get((admin_id or "").strip())
        if hashed is None:
            return False
        return verify_password(password or "", hashed)

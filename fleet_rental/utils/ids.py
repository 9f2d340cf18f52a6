import re
import uuid
from typing import Callable, Iterable

from .constants import (
    RESERVATION_ID_PREFIX,
    RESERVATION_TOKEN_LENGTH,
    VEHICLE_ID_PREFIX,
    VEHICLE_ID_WIDTH,
)

_VEHICLE_ID = re.compile(rf"^{re.escape(VEHICLE_ID_PREFIX)}(\d+)$")


def _uuid_hex() -> str:
    return uuid.uuid4().hex


class IdGenerator:
    """
    Produces reservation tokens ('R-' + 8 lowercase hex chars) and sequential
    vehicle ids ('C-001', 'C-002', ...). Tests pass ``token_source`` to get
    predictable reservation ids.
    """

    def __init__(self, token_source: Callable[[], str] | None = None):
        self._token_source = token_source or _uuid_hex

    def reservation_id(self) -> str:
        token = self._token_source().lower()[:RESERVATION_TOKEN_LENGTH]
        return f"{RESERVATION_ID_PREFIX}{token}"

    @staticmethod
    def next_vehicle_id(existing_ids: Iterable[str]) -> str:
        """Next id after the highest numeric 'C-NNN' already in use; other ids are ignored."""
        highest = 0
        for vid in existing_ids:
            m = _VEHICLE_ID.match(vid or "")
            if m:
                highest = max(highest, int(m.group(1)))
        return f"{VEHICLE_ID_PREFIX}{highest + 1:0{VEHICLE_ID_WIDTH}d}"

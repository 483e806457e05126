"""Online-user table: framed IP to subscriber identity, shared between threads."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace


@dataclass
class UserSession:
    """Identity of a subscriber that is currently online."""

    user_account: str = ""
    user_mac: int = 0
    bras_mac: int = 0
    framed_ip: int = 0
    online_time: int = 0
    online: bool = False


class RadiusSessionTable:
    """Thread-safe map from a subscriber's framed IP to its UserSession.

    One thread records logins and logouts; any number of others look users up.
    Lookups hand out copies, so callers never share state with the table.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table: dict[int, UserSession] = {}

    def user_online(self, ip: int, session: UserSession) -> None:
        """Record (or replace) the session bound to ``ip``."""
        with self._lock:
            self._table[ip] = replace(session)

    def user_offline(self, ip: int) -> None:
        """Forget the session bound to ``ip``; unknown addresses are ignored."""
        with self._lock:
            self._table.pop(ip, None)

    def lookup(self, ip: int) -> UserSession | None:
        """Copy of the session bound to ``ip``, or None if nobody holds it."""
        with self._lock:
            session = self._table.get(ip)
            return None if session is None else replace(session)

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)
# MIT License
# Copyright (c) 2025 Hashborn

"""
Admin sessions: opaque bearer tokens kept in memory.
"""

import logging
import secrets
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class AdminSessions:
    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password
        self._sessions: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def login(self, username: Optional[str], password: Optional[str]) -> Optional[str]:
        """Returns a new token, or None if the credentials are wrong."""
        if not username or not password:
            return None
        valid = (secrets.compare_digest(username, self.username)
                 and secrets.compare_digest(password, self.password))
        if not valid:
            logger.warning("Failed admin login attempt")
            return None

        token = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[token] = {"username": username, "login_time": datetime.now(timezone.utc)}
        logger.info("Admin logged in")
        return token

    def logout(self, token: Optional[str]):
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def is_valid(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            return token in self._sessions


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    return authorization.replace("Bearer ", "", 1).strip() or None

"""
Session Utilities for the CatGuard intake service.

Handles:
- Signed session cookies (itsdangerous)
- In-memory registry of IntakeSession objects

The cookie carries only a signed session id. Drafts live in process memory
and are lost on restart. Every lookup counts as activity and every response
re-signs the cookie, so both the cookie and the session expire SESSION_MAX_AGE
after the last request. The oldest sessions are evicted once MAX_SESSIONS is
reached.

Environment Variables:
  SESSION_SECRET  - Secret key for signing session cookies (generated if unset)
  SESSION_MAX_AGE - Idle lifetime in seconds (see config.py)
  MAX_SESSIONS    - Registry size cap (see config.py)
"""
import os
import secrets
import threading
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Optional, Tuple

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import get_default_locale, get_max_sessions, get_session_max_age
from intake import IntakeSession


SESSION_COOKIE_NAME = "catguard_session"
SESSION_SALT = "catguard-intake"


def get_session_secret() -> str:
    """Get or generate session secret."""
    secret = os.getenv("SESSION_SECRET")
    if not secret:
        secret = secrets.token_hex(32)
        os.environ["SESSION_SECRET"] = secret
        print("[SESSION][WARNING] No SESSION_SECRET set - using generated secret (sessions won't persist across restarts)")
    return secret


def get_serializer() -> URLSafeTimedSerializer:
    """Get the session serializer."""
    return URLSafeTimedSerializer(get_session_secret(), salt=SESSION_SALT)


def create_session_token(session_id: str) -> str:
    """Create a signed cookie value for a session id."""
    serializer = get_serializer()
    data = {
        "session_id": session_id,
        "created_at": datetime.utcnow().isoformat()
    }
    return serializer.dumps(data)


def verify_session_token(token: Optional[str]) -> Optional[str]:
    """
    Verify a session cookie value.

    Returns:
        session_id if valid, None if missing, tampered or expired
    """
    if not token:
        return None

    serializer = get_serializer()
    try:
        data = serializer.loads(token, max_age=get_session_max_age())
        return data.get("session_id")
    except (BadSignature, SignatureExpired):
        return None


class SessionRegistry:
    """
    Process-local store of intake sessions, least recently used first.

    Access refreshes a session's position; expired sessions are dropped on
    lookup and when a new session is added.
    """

    def __init__(self):
        self._sessions: "OrderedDict[str, IntakeSession]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _expired(self, session: IntakeSession, now: datetime) -> bool:
        return now - session.updated_at > timedelta(seconds=get_session_max_age())

    def _purge_expired(self, now: datetime) -> None:
        stale = [sid for sid, s in self._sessions.items() if self._expired(s, now)]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            print(f"[SESSION] Expired {len(stale)} idle session(s)")

    def get(self, session_id: Optional[str]) -> Optional[IntakeSession]:
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if self._expired(session, datetime.utcnow()):
                del self._sessions[session_id]
                return None
            self._sessions.move_to_end(session_id)
            session.touch()
            return session

    def create(self) -> IntakeSession:
        session = IntakeSession(locale=get_default_locale())
        with self._lock:
            self._purge_expired(datetime.utcnow())
            limit = get_max_sessions()
            while len(self._sessions) >= limit:
                evicted, _ = self._sessions.popitem(last=False)
                print(f"[SESSION] Registry full ({limit}) - evicted {evicted[:8]}")
            self._sessions[session.session_id] = session
        print(f"[SESSION] Created {session.session_id[:8]} (locale={session.locale.value})")
        return session

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


registry = SessionRegistry()


def get_or_create_session(token: Optional[str]) -> Tuple[IntakeSession, bool]:
    """
    Resolve the session for a cookie value.

    Returns:
        (session, is_new) - is_new means the caller must set a fresh cookie
    """
    session = registry.get(verify_session_token(token))
    if session is not None:
        return session, False
    return registry.create(), True

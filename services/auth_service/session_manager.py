"""
Session manager - owns the bearer credential, the authenticated user and its expiry.

The manager is driven by authentication responses and never talks to an
identity provider itself. Validity is always derived from the stored
credential, user and clock; no separate "logged in" flag is kept.
"""

import json
import threading
import time
from typing import Callable, List, Optional

from services.auth_service.models import (
    Credential,
    LoggedIn,
    LoggedOut,
    SessionEvent,
    SessionState,
    UserRecord,
)
from services.auth_service.secure_storage import SecureStorage
from services.errors import InvalidCredentialError, SecureStorageError
from utils.logging_config import get_logger, log_session_event


DEFAULT_TTL_SECONDS = 3600
SESSION_STORAGE_KEY = "session"

SessionListener = Callable[[SessionEvent], None]


class SessionManager:
    """
    Session/token lifecycle manager.

    Args:
        clock: Returns the current time in epoch seconds. Injected so tests
            can simulate expiry without waiting.
        storage: Optional secure storage. When given, sessions are written on
            save, removed on clear and can be reloaded with restore().
    """

    def __init__(self, clock: Callable[[], float] = time.time,
                 storage: Optional[SecureStorage] = None):
        self.logger = get_logger(__name__)
        self._clock = clock
        self._storage = storage
        self._lock = threading.RLock()
        self._credential: Optional[Credential] = None
        self._user: Optional[UserRecord] = None
        self._listeners: List[SessionListener] = []

    def save_session(self, credential: str, user: UserRecord,
                     ttl_seconds: float = DEFAULT_TTL_SECONDS) -> None:
        """
        Store a new session, replacing any previous one

        Args:
            credential: Bearer token, must be non-empty
            user: Authenticated user record
            ttl_seconds: Lifetime of the credential from now. A non-positive
                TTL stores an already expired credential.
        """
        if not credential:
            raise InvalidCredentialError("Cannot save a session with an empty credential")

        with self._lock:
            now = self._clock()
            self._credential = Credential(token=credential, issued_at=now, expires_at=now + ttl_seconds)
            self._user = user
            event = SessionEvent("saved", user=user, expires_at=self._credential.expires_at)
            self._persist()

        log_session_event(self.logger, "saved", user.uid, ttl_seconds=ttl_seconds)
        self._notify(event)

    def clear_session(self) -> None:
        """Discard credential, user and expiry. Safe to call when logged out."""
        with self._lock:
            had_session = self._credential is not None or self._user is not None
            previous_user = self._user
            self._credential = None
            self._user = None
            self._discard_persisted()

        if had_session:
            log_session_event(self.logger, "cleared", previous_user.uid if previous_user else None)
            self._notify(SessionEvent("cleared", user=previous_user))

    def get_valid_token(self) -> Optional[str]:
        """Return the credential if the session is valid, otherwise None"""
        with self._lock:
            if self._is_valid_locked():
                return self._credential.token
            return None

    def is_valid(self) -> bool:
        """True iff credential and user are present and the credential has not expired"""
        with self._lock:
            return self._is_valid_locked()

    def remaining_seconds(self) -> float:
        """Seconds until expiry, never negative"""
        with self._lock:
            if self._credential is None:
                return 0.0
            return self._credential.remaining_at(self._clock())

    def current_user(self) -> Optional[UserRecord]:
        """The last saved user; expiry does not clear it"""
        with self._lock:
            return self._user

    def state(self) -> SessionState:
        """Derived session state snapshot"""
        with self._lock:
            if self._is_valid_locked():
                return LoggedIn(user=self._user, credential=self._credential)
            return LoggedOut()

    def restore(self) -> bool:
        """
        Reload a persisted session from secure storage

        Returns:
            True if a still-valid session was restored
        """
        if self._storage is None:
            return False

        try:
            raw = self._storage.get_string(SESSION_STORAGE_KEY)
        except SecureStorageError as e:
            self.logger.warning(f"Could not read persisted session: {e}")
            return False

        if not raw:
            return False

        try:
            data = json.loads(raw)
            credential = Credential(
                token=data["token"],
                issued_at=float(data["issued_at"]),
                expires_at=float(data["expires_at"]),
            )
            user = UserRecord.from_dict(data["user"])
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning(f"Discarding unreadable persisted session: {e}")
            self._discard_persisted()
            return False

        with self._lock:
            restorable = credential.is_valid_at(self._clock()) and bool(user.uid)
            if restorable:
                self._credential = credential
                self._user = user

        if not restorable:
            self._discard_persisted()
            return False

        log_session_event(self.logger, "restored", user.uid)
        self._notify(SessionEvent("restored", user=user, expires_at=credential.expires_at))
        return True

    def subscribe(self, listener: SessionListener) -> None:
        """Register a callback invoked after every session change"""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: SessionListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _is_valid_locked(self) -> bool:
        return (
            self._credential is not None
            and self._user is not None
            and self._credential.is_valid_at(self._clock())
        )

    def _persist(self) -> None:
        if self._storage is None or self._credential is None or self._user is None:
            return

        payload = json.dumps({
            "token": self._credential.token,
            "issued_at": self._credential.issued_at,
            "expires_at": self._credential.expires_at,
            "user": self._user.to_dict(),
        })
        try:
            self._storage.save_string(SESSION_STORAGE_KEY, payload)
        except SecureStorageError as e:
            # The in-memory session stays authoritative
            self.logger.warning(f"Could not persist session: {e}")

    def _discard_persisted(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.remove(SESSION_STORAGE_KEY)
        except SecureStorageError as e:
            self.logger.warning(f"Could not remove persisted session: {e}")

    def _notify(self, event: SessionEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                self.logger.error(f"Session listener failed on '{event.event_type}': {e}", exc_info=True)

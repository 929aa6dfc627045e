"""
User, credential and session data models for the authentication service.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Optional, Union


class UserRole(Enum):
    """Global role of a user account"""
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'UserRole':
        """Parse a role name from the API, defaulting to USER"""
        if not value:
            return cls.USER
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.USER


@dataclass(frozen=True)
class UserRecord:
    """Authenticated user data model"""
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    global_role: UserRole = UserRole.USER

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["global_role"] = self.global_role.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserRecord':
        """Build a record from an API or storage payload"""
        uid = data.get("uid") or data.get("id") or data.get("userId") or ""
        return cls(
            uid=str(uid),
            display_name=data.get("display_name") or data.get("displayName") or data.get("name") or None,
            email=data.get("email") or None,
            global_role=UserRole.parse(data.get("global_role") or data.get("globalRole")),
        )


@dataclass(frozen=True)
class Credential:
    """Bearer token with its issuance and expiration (epoch seconds)"""
    token: str
    issued_at: float
    expires_at: float

    def is_valid_at(self, now: float) -> bool:
        return bool(self.token) and now < self.expires_at

    def remaining_at(self, now: float) -> float:
        return max(0.0, self.expires_at - now)


@dataclass(frozen=True)
class LoggedOut:
    """Session state when no valid credential is held"""
    is_logged_in = False


@dataclass(frozen=True)
class LoggedIn:
    """Session state when a valid credential and user are held"""
    user: UserRecord
    credential: Credential
    is_logged_in = True


SessionState = Union[LoggedOut, LoggedIn]


@dataclass(frozen=True)
class AuthResult:
    """Uniform outcome of an authentication attempt"""
    success: bool
    user_id: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, user_id: Optional[str]) -> 'AuthResult':
        return cls(success=True, user_id=user_id)

    @classmethod
    def failure(cls, error_message: str) -> 'AuthResult':
        return cls(success=False, error_message=error_message)


@dataclass(frozen=True)
class IdentityInfo:
    """Identity cached by an identity provider after sign-in"""
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


@dataclass
class SessionEvent:
    """Notification sent to session subscribers"""
    event_type: str  # saved, cleared, restored
    user: Optional[UserRecord] = None
    expires_at: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

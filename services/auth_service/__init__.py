"""
Auth service - session lifecycle, remote authentication and secure storage.
"""

from .models import (
    AuthResult,
    Credential,
    IdentityInfo,
    LoggedIn,
    LoggedOut,
    SessionEvent,
    SessionState,
    UserRecord,
    UserRole,
)
from .secure_storage import SecureStorage, InMemorySecureStorage, EncryptedFileSecureStorage
from .session_manager import SessionManager, DEFAULT_TTL_SECONDS
from .auth_service import AuthService

__all__ = [
    'AuthResult',
    'Credential',
    'IdentityInfo',
    'LoggedIn',
    'LoggedOut',
    'SessionEvent',
    'SessionState',
    'UserRecord',
    'UserRole',
    'SecureStorage',
    'InMemorySecureStorage',
    'EncryptedFileSecureStorage',
    'SessionManager',
    'DEFAULT_TTL_SECONDS',
    'AuthService',
]

"""
Exception hierarchy for the client core.

Expected authentication failures are never raised; they travel as
AuthResult values. These exceptions signal misuse or broken local resources.
"""


class PlayScoreError(Exception):
    """Base class for client core errors"""
    pass


class InvalidCredentialError(PlayScoreError, ValueError):
    """Raised when a session is saved with an empty credential"""
    pass


class InvalidDestinationError(PlayScoreError, ValueError):
    """Raised when a destination is built with missing or unexpected parameters"""
    pass


class SecureStorageError(PlayScoreError):
    """Raised when the secure storage backend cannot be read or written"""
    pass

"""
Identity provider for hosts without identity support.
"""

from typing import Optional

from services.auth_service.models import AuthResult, IdentityInfo
from utils.logging_config import get_logger


UNAVAILABLE_MESSAGE = "Identity provider not available on this platform"


class NoOpIdentityProvider:
    """Reports every sign-in as failed and holds no identity"""

    def __init__(self):
        self.logger = get_logger(__name__)

    async def create_account(self, email: str, password: str) -> AuthResult:
        self.logger.debug("create_account called on the no-op identity provider")
        return AuthResult.failure(UNAVAILABLE_MESSAGE)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        self.logger.debug("sign_in called on the no-op identity provider")
        return AuthResult.failure(UNAVAILABLE_MESSAGE)

    def sign_out(self) -> None:
        pass

    def current_identity(self) -> Optional[IdentityInfo]:
        return None

    async def bearer_credential(self) -> str:
        return ""

    async def update_display_name(self, display_name: str) -> None:
        pass

"""
Identity provider contract.

Adapters implement this protocol directly; none of them subclasses another.
"""

from typing import Optional, Protocol, runtime_checkable

from services.auth_service.models import AuthResult, IdentityInfo


@runtime_checkable
class IdentityProvider(Protocol):
    """
    Platform identity capability.

    create_account and sign_in never raise for expected failures (bad
    credentials, network errors); they return AuthResult(success=False).
    bearer_credential returns an empty string when no credential is available.
    """

    async def create_account(self, email: str, password: str) -> AuthResult:
        ...

    async def sign_in(self, email: str, password: str) -> AuthResult:
        ...

    def sign_out(self) -> None:
        ...

    def current_identity(self) -> Optional[IdentityInfo]:
        ...

    async def bearer_credential(self) -> str:
        ...

    async def update_display_name(self, display_name: str) -> None:
        ...

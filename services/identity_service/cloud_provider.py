"""
Identity provider backed by the cloud identity REST service.
"""

import threading
from typing import Any, Dict, Optional

import httpx

from services.auth_service.models import AuthResult, IdentityInfo
from utils.logging_config import get_logger


class CloudIdentityProvider:
    """
    Talks to `{auth_api_url}/register`, `/login` and `/update-profile`.

    The identity and id token from the last successful sign-in are cached in
    memory; current_identity() and sign_out() never touch the network.
    """

    def __init__(self, auth_api_url: str, timeout_seconds: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.auth_api_url = auth_api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._lock = threading.Lock()
        self._identity: Optional[IdentityInfo] = None
        self._id_token: Optional[str] = None
        self.logger = get_logger(__name__)

    async def create_account(self, email: str, password: str) -> AuthResult:
        self.logger.info(f"Registering identity for {email}")
        return await self._authenticate("/register", email, password, "Registration failed",
                                        require_token=False)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        self.logger.info(f"Signing in identity for {email}")
        return await self._authenticate("/login", email, password, "Login failed",
                                        require_token=True)

    def sign_out(self) -> None:
        with self._lock:
            identity = self._identity
            self._identity = None
            self._id_token = None
        if identity is not None:
            self.logger.info(f"Signed out identity {identity.uid}")

    def current_identity(self) -> Optional[IdentityInfo]:
        with self._lock:
            return self._identity

    async def bearer_credential(self) -> str:
        with self._lock:
            return self._id_token or ""

    async def update_display_name(self, display_name: str) -> None:
        with self._lock:
            token = self._id_token

        if not token:
            self.logger.warning("Cannot update profile: no authentication token")
            return

        try:
            payload = await self._post(
                "/update-profile",
                {"displayName": display_name},
                headers={"Authorization": f"Bearer {token}"},
            )
        except (httpx.HTTPError, ValueError) as e:
            self.logger.warning(f"Profile update failed: {e}")
            return

        if payload.get("success"):
            with self._lock:
                if self._identity is not None:
                    self._identity = IdentityInfo(
                        uid=self._identity.uid,
                        email=self._identity.email,
                        display_name=display_name,
                    )
            self.logger.info("Profile updated successfully")
        else:
            self.logger.warning(f"Failed to update profile: {payload.get('errorMessage')}")

    async def _authenticate(self, path: str, email: str, password: str,
                            fallback_message: str, require_token: bool) -> AuthResult:
        try:
            payload = await self._post(path, {"email": email, "password": password})
        except httpx.HTTPError as e:
            self.logger.warning(f"{fallback_message}: network error: {e}")
            return AuthResult.failure(f"Network error: {e}")
        except ValueError as e:
            self.logger.warning(f"{fallback_message}: unreadable response: {e}")
            return AuthResult.failure("Network error: invalid response from identity service")

        token = payload.get("token")
        if not payload.get("success") or (require_token and not token):
            return AuthResult.failure(payload.get("errorMessage") or fallback_message)

        user_id = payload.get("userId") or ""
        with self._lock:
            self._identity = IdentityInfo(
                uid=user_id,
                email=payload.get("email") or email,
                display_name=payload.get("displayName") or "",
            )
            self._id_token = token
        return AuthResult.ok(user_id)

    async def _post(self, path: str, body: Dict[str, Any],
                    headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=self.auth_api_url,
            timeout=self.timeout_seconds,
            transport=self._transport,
        ) as client:
            response = await client.post(path, json=body, headers=headers)

        # Rejections come back as JSON bodies with success=false, whatever the status
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("expected a JSON object")
        return payload

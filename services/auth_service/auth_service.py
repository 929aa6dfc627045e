"""
Authentication service - talks to the remote auth API and feeds the session manager.

Every transport fault and error payload is normalized into an AuthResult so
callers never see raw HTTP exceptions.
"""

from typing import Any, Dict, Optional

import httpx
from jose import jwt
from jose.exceptions import JOSEError

from services.auth_service.models import AuthResult, UserRecord
from services.auth_service.session_manager import DEFAULT_TTL_SECONDS, SessionManager
from utils.logging_config import get_logger, log_execution_time


EMAIL_IN_USE_MESSAGE = "Email already in use. Please use a different email address."
_CONFLICT_MARKERS = ("already", "exists", "in use", "duplicate")


def extract_message(payload: Any) -> Optional[str]:
    """Pick the human readable message out of an API error payload"""
    if not isinstance(payload, dict):
        return None
    for key in ("message", "msg", "error", "errorMessage"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def is_email_conflict(message: Optional[str]) -> bool:
    if not message:
        return False
    lowered = message.lower()
    return "email" in lowered and any(marker in lowered for marker in _CONFLICT_MARKERS)


def user_from_token(token: str) -> Optional[UserRecord]:
    """
    Decode user claims from a JWT payload without verifying the signature

    The API only returns a token on login; identity claims live in its payload.
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JOSEError:
        return None

    uid = claims.get("id") or claims.get("sub") or claims.get("user_id")
    if not uid:
        return None
    return UserRecord.from_dict({
        "uid": uid,
        "name": claims.get("name"),
        "email": claims.get("email"),
        "globalRole": claims.get("globalRole"),
    })


class AuthService:
    """
    Client for `POST /user/login` and `POST /user/register`.

    Successful logins are handed to the session manager with the server's
    `expiresIn` or the default TTL.
    """

    def __init__(self, session_manager: SessionManager, base_url: str,
                 timeout_seconds: float = 10.0,
                 default_ttl_seconds: int = DEFAULT_TTL_SECONDS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.session_manager = session_manager
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.default_ttl_seconds = default_ttl_seconds
        self._transport = transport
        self.logger = get_logger(__name__)

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate against the remote API and save the session

        Args:
            email: Account email
            password: Account password

        Returns:
            AuthResult with the user id on success, an error message otherwise
        """
        if not email or not password:
            return AuthResult.failure("Please enter both email and password")

        try:
            with log_execution_time(self.logger, "login request"):
                response = await self._post("/user/login", {"email": email, "password": password})
        except httpx.HTTPError as e:
            return AuthResult.failure(f"Login failed: Network error: {e}")

        payload = self._json(response)

        if not response.is_success:
            message = extract_message(payload) or f"Login failed: HTTP {response.status_code}"
            self.logger.info(f"Login rejected for {email}: {message}")
            return AuthResult.failure(message)

        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            return AuthResult.failure("Login failed: Token missing in response")

        user = self._user_from_payload(payload, token, email)
        if user is None:
            return AuthResult.failure("Login failed: response carries no user identity")

        self.session_manager.save_session(token, user, self._ttl_from_payload(payload))
        self.logger.info(f"User logged in: {user.uid}")
        return AuthResult.ok(user.uid)

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """
        Create an account on the remote API

        When the server answers with a token the session is saved right away;
        otherwise the user must log in afterwards.
        """
        if not all([name, email, password]):
            return AuthResult.failure("All fields are required")

        if "@" not in email:
            return AuthResult.failure("Please enter a valid email address")

        try:
            with log_execution_time(self.logger, "register request"):
                response = await self._post(
                    "/user/register", {"name": name, "email": email, "password": password}
                )
        except httpx.HTTPError as e:
            return AuthResult.failure(f"Registration failed: Network error: {e}")

        payload = self._json(response)

        if not response.is_success:
            message = extract_message(payload)
            if is_email_conflict(message):
                return AuthResult.failure(EMAIL_IN_USE_MESSAGE)
            return AuthResult.failure(message or f"Registration failed: HTTP {response.status_code}")

        token = payload.get("token") if isinstance(payload, dict) else None
        user = self._user_from_payload(payload, token, email, name) if isinstance(payload, dict) else None

        if token and user is not None:
            self.session_manager.save_session(token, user, self._ttl_from_payload(payload))
            self.logger.info(f"User registered and logged in: {user.uid}")
            return AuthResult.ok(user.uid)

        self.logger.info(f"User registered: {email}")
        return AuthResult.ok(user.uid if user is not None else None)

    def logout(self) -> None:
        self.session_manager.clear_session()

    def is_logged_in(self) -> bool:
        return self.session_manager.is_valid()

    def auth_headers(self) -> Dict[str, str]:
        """Authorization header for API calls, empty when the session is not valid"""
        token = self.session_manager.get_valid_token()
        if token is None:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def _post(self, path: str, body: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            transport=self._transport,
        ) as client:
            return await client.post(path, json=body)

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            self.logger.warning(f"Non-JSON response from auth API (HTTP {response.status_code})")
            return None

    def _user_from_payload(self, payload: Dict[str, Any], token: Optional[str],
                           email: str, name: Optional[str] = None) -> Optional[UserRecord]:
        user_data = payload.get("user")
        if isinstance(user_data, dict):
            user = UserRecord.from_dict(user_data)
            if user.uid:
                return user

        if token:
            user = user_from_token(token)
            if user is not None:
                return user

        user_id = payload.get("userId") or payload.get("id")
        if user_id:
            return UserRecord(uid=str(user_id), display_name=name, email=email)
        return None

    def _ttl_from_payload(self, payload: Dict[str, Any]) -> float:
        expires_in = payload.get("expiresIn")
        if isinstance(expires_in, (int, float)) and not isinstance(expires_in, bool) and expires_in > 0:
            return float(expires_in)
        return float(self.default_ttl_seconds)

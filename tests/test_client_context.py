"""
Tests for the Streamlit client context wiring
"""

import json
from unittest.mock import Mock, patch

import httpx
import pytest
from jose import jwt

from config.app_config import AppConfig
from services.auth_service import (
    AuthService,
    IdentityInfo,
    InMemorySecureStorage,
    SessionManager,
    UserRecord,
)
from services.identity_service import CloudIdentityProvider, NoOpIdentityProvider
from services.navigation_service import HOME, LOGIN
from services.ui_service import (
    build_client_context,
    get_client_context,
    has_existing_session,
    reset_client_context,
    start_navigation,
)
from services.ui_service import account_actions


class MockSessionState:
    """Mock Streamlit session state for testing"""

    def __init__(self):
        self.data = {}

    def __contains__(self, key):
        return key in self.data

    def __getitem__(self, key):
        return self.data[key]

    def __setitem__(self, key, value):
        self.data[key] = value

    def __delitem__(self, key):
        del self.data[key]


@pytest.fixture
def app_config():
    config = AppConfig()
    config.auth.identity_provider = "noop"
    return config


class TestBuildClientContext:
    """Test component wiring"""

    def test_components_share_session_manager(self, app_config):
        context = build_client_context(app_config)

        assert context.auth_service.session_manager is context.session_manager
        assert isinstance(context.identity_provider, NoOpIdentityProvider)
        assert context.navigation.current_destination == LOGIN
        assert context.navigation.authenticated_root == HOME

    def test_uses_config_endpoints(self, app_config):
        app_config.api.base_url = "https://api.example.com/api"
        app_config.auth.identity_provider = "cloud"

        context = build_client_context(app_config)

        assert context.auth_service.base_url == "https://api.example.com/api"
        assert isinstance(context.identity_provider, CloudIdentityProvider)

    def test_persistence_opens_encrypted_store(self, app_config, tmp_path):
        app_config.auth.persist_session = True
        app_config.auth.secure_storage_dir = str(tmp_path / "secure")

        build_client_context(app_config)

        assert (tmp_path / "secure" / "master.key").exists()


class TestStartupCheck:
    """Test the startup session check"""

    def test_no_session(self, app_config):
        context = build_client_context(app_config)

        assert has_existing_session(context) is False
        assert start_navigation(context) == LOGIN

    def test_valid_session_starts_at_home(self, app_config):
        context = build_client_context(app_config)
        context.session_manager.save_session("abc", UserRecord(uid="u1"))

        assert start_navigation(context) == HOME
        assert context.navigation.backstack == (HOME,)

    def test_restored_session(self, app_config):
        storage = InMemorySecureStorage()
        SessionManager(storage=storage).save_session("abc", UserRecord(uid="u1"))
        app_config.auth.persist_session = True

        context = build_client_context(app_config, storage=storage)

        assert has_existing_session(context) is True
        assert context.session_manager.get_valid_token() == "abc"

    def test_restore_skipped_without_persistence(self, app_config):
        storage = InMemorySecureStorage()
        SessionManager(storage=storage).save_session("abc", UserRecord(uid="u1"))

        context = build_client_context(app_config, storage=storage)

        assert has_existing_session(context) is False

    def test_provider_identity_is_not_consulted(self, app_config):
        """Only the session manager decides the start destination"""
        context = build_client_context(app_config)
        context.identity_provider = Mock()
        context.identity_provider.current_identity.return_value = IdentityInfo(uid="u1")

        assert has_existing_session(context) is False
        context.identity_provider.current_identity.assert_not_called()


class TestSessionStateContext:
    """Test per-browser-session storage of the context"""

    def test_context_created_once(self, app_config):
        with patch('services.ui_service.client_context.st') as mock_st, \
                patch('services.ui_service.client_context.get_config', return_value=app_config):
            mock_st.session_state = MockSessionState()

            first = get_client_context()
            second = get_client_context()

            assert first is second
            assert first.navigation.current_destination == LOGIN

    def test_reset_disposes_navigation(self, app_config):
        with patch('services.ui_service.client_context.st') as mock_st, \
                patch('services.ui_service.client_context.get_config', return_value=app_config):
            mock_st.session_state = MockSessionState()

            first = get_client_context()
            reset_client_context()
            second = get_client_context()

            assert first.navigation.is_disposed is True
            assert first is not second

    def test_build_failure_is_tracked(self):
        tracker = Mock()
        with patch('services.ui_service.client_context.st') as mock_st, \
                patch('services.ui_service.client_context.build_client_context',
                      side_effect=RuntimeError("boom")), \
                patch('services.ui_service.client_context.get_error_tracker', return_value=tracker):
            mock_st.session_state = MockSessionState()

            with pytest.raises(RuntimeError):
                get_client_context()

        tracker.track_error.assert_called_once()


class TestLogout:
    """Test the logout flow shared by every authenticated screen"""

    def test_logout_clears_session_and_history(self, app_config):
        from services.navigation_service import PROFILE
        from services.ui_service.account_actions import logout

        context = build_client_context(app_config)
        context.session_manager.save_session("abc", UserRecord(uid="u1"))
        context.navigation.navigate_to_root(HOME)
        context.navigation.navigate_to(PROFILE)

        logout(context)

        assert context.session_manager.is_valid() is False
        assert context.navigation.backstack == (LOGIN,)

    def test_logout_signs_provider_out(self, app_config):
        from services.ui_service.account_actions import logout

        context = build_client_context(app_config)
        context.identity_provider = Mock()

        logout(context)

        context.identity_provider.sign_out.assert_called_once()


def make_token(**claims):
    return jwt.encode(claims, "test-secret", algorithm="HS256")


@pytest.fixture
def wired_context(app_config):
    """Client context whose auth API and identity provider answer from handlers"""
    calls = []
    token = make_token(id="u1", name="Alice", email="alice@example.com")

    def api_handler(request):
        calls.append(("api", request.url.path))
        if request.url.path.endswith("/user/login"):
            body = json.loads(request.content)
            if body["password"] != "secret":
                return httpx.Response(401, json={"message": "Invalid credentials"})
        return httpx.Response(200, json={"token": token})

    def identity_handler(request):
        calls.append(("identity", request.url.path))
        if request.url.path.endswith("/update-profile"):
            return httpx.Response(200, json={"success": True})
        return httpx.Response(200, json={
            "success": True,
            "userId": "uid-1",
            "token": "id-token",
            "email": "alice@example.com",
        })

    context = build_client_context(app_config)
    context.auth_service = AuthService(
        context.session_manager, "http://api.test/api", transport=httpx.MockTransport(api_handler)
    )
    context.identity_provider = CloudIdentityProvider(
        "http://auth.test/api/auth", transport=httpx.MockTransport(identity_handler)
    )
    context.calls = calls
    return context


class TestAccountActions:
    """Test login, registration and profile flows across both auth backends"""

    @pytest.mark.asyncio
    async def test_login_signs_in_identity_provider(self, wired_context):
        result = await account_actions.login(wired_context, "alice@example.com", "secret")

        assert result.success is True
        assert wired_context.session_manager.is_valid() is True
        assert wired_context.identity_provider.current_identity().uid == "uid-1"
        assert ("identity", "/api/auth/login") in wired_context.calls

    @pytest.mark.asyncio
    async def test_failed_login_skips_identity_provider(self, wired_context):
        result = await account_actions.login(wired_context, "alice@example.com", "wrong")

        assert result.success is False
        assert result.error_message == "Invalid credentials"
        assert wired_context.identity_provider.current_identity() is None
        assert all(kind == "api" for kind, _ in wired_context.calls)

    @pytest.mark.asyncio
    async def test_provider_failure_keeps_login(self, wired_context):
        """A provider without identity support never fails the login"""
        wired_context.identity_provider = NoOpIdentityProvider()

        result = await account_actions.login(wired_context, "alice@example.com", "secret")

        assert result.success is True
        assert wired_context.session_manager.is_valid() is True

    @pytest.mark.asyncio
    async def test_register_creates_account_and_sets_name(self, wired_context):
        result = await account_actions.register(wired_context, "Alice", "alice@example.com", "secret")

        assert result.success is True
        assert ("identity", "/api/auth/register") in wired_context.calls
        assert ("identity", "/api/auth/update-profile") in wired_context.calls
        assert wired_context.identity_provider.current_identity().display_name == "Alice"

    @pytest.mark.asyncio
    async def test_update_display_name_after_login(self, wired_context):
        await account_actions.login(wired_context, "alice@example.com", "secret")

        updated = await account_actions.update_display_name(wired_context, "Alice B")

        assert updated is True
        assert wired_context.identity_provider.current_identity().display_name == "Alice B"

    @pytest.mark.asyncio
    async def test_update_display_name_without_credential(self, wired_context):
        updated = await account_actions.update_display_name(wired_context, "Alice B")

        assert updated is False
        assert wired_context.calls == []


class TestSessionSidebar:
    """Test the account sidebar"""

    def render_sidebar(self, app_config, debug):
        from services.ui_service import screens

        app_config.debug = debug
        context = build_client_context(app_config)
        tracker = Mock()
        tracker.get_error_summary.return_value = {"total_errors": 1}
        with patch.object(screens, 'st') as mock_st, \
                patch.object(screens, 'get_error_tracker', return_value=tracker):
            mock_st.button.return_value = False
            screens.render_session_sidebar(context)
        return mock_st

    def test_debug_sidebar_shows_error_summary(self, app_config):
        mock_st = self.render_sidebar(app_config, debug=True)

        mock_st.json.assert_called_once_with({"total_errors": 1})

    def test_diagnostics_hidden_outside_debug(self, app_config):
        mock_st = self.render_sidebar(app_config, debug=False)

        mock_st.json.assert_not_called()

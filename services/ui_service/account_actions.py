"""
Account actions shared by the screens.

The remote auth API owns the session; the identity provider is signed in
alongside it so profile calls have a provider credential. A provider failure
never turns a successful login into a failed one.
"""

from services.auth_service import AuthResult
from services.navigation_service import LOGIN
from services.ui_service.client_context import ClientContext
from utils.logging_config import get_logger

logger = get_logger(__name__)


async def login(context: ClientContext, email: str, password: str) -> AuthResult:
    """Log in against the auth API, then sign the identity provider in"""
    result = await context.auth_service.login(email, password)
    if not result.success:
        return result

    identity = await context.identity_provider.sign_in(email, password)
    if not identity.success:
        logger.warning(f"Identity provider sign-in failed: {identity.error_message}")
    return result


async def register(context: ClientContext, name: str, email: str, password: str) -> AuthResult:
    """Register on the auth API and create the matching provider account"""
    result = await context.auth_service.register(name, email, password)
    if not result.success:
        return result

    identity = await context.identity_provider.create_account(email, password)
    if identity.success:
        await context.identity_provider.update_display_name(name)
    else:
        logger.warning(f"Identity account creation failed: {identity.error_message}")
    return result


async def update_display_name(context: ClientContext, display_name: str) -> bool:
    """
    Push a new display name to the identity provider

    Returns:
        False when the provider holds no credential to authorize the call
    """
    if not await context.identity_provider.bearer_credential():
        return False
    await context.identity_provider.update_display_name(display_name)
    return True


def logout(context: ClientContext):
    """Clear the session and collapse history to the login screen"""
    context.auth_service.logout()
    context.identity_provider.sign_out()
    context.navigation.navigate_to_root(LOGIN)
    logger.info("User logged out")

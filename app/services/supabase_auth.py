"""
Supabase Auth actions: sign in, sign up, sign out.

Sign-in and sign-up run on a short-lived client so the user session they
establish never leaks into the client shared by the rental store.
"""
import logging
from typing import Any, Callable, Dict

from supabase import Client, create_client

from app.core.config import Settings
from app.core.errors import AuthError

logger = logging.getLogger(__name__)


class SupabaseAuthActions:
    def __init__(self, client_factory: Callable[[], Client], admin_client: Client):
        self._client_factory = client_factory
        self.admin_client = admin_client

    @classmethod
    def from_settings(cls, settings: Settings, admin_client: Client) -> "SupabaseAuthActions":
        def factory() -> Client:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        return cls(factory, admin_client)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """
        Sign in with email and password.

        Returns:
            Session tokens plus the user's id and email
        """
        try:
            response = self._client_factory().auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as e:
            logger.warning("Sign in failed for %s: %s", email, e)
            raise AuthError(getattr(e, "message", None) or str(e)) from e

        session = response.session
        if session is None or response.user is None:
            raise AuthError("Sign in failed: no session returned")
        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_in": session.expires_in,
            "token_type": "bearer",
            "user": {"id": response.user.id, "email": response.user.email},
        }

    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        try:
            response = self._client_factory().auth.sign_up({
                "email": email,
                "password": password,
            })
        except Exception as e:
            logger.warning("Sign up failed for %s: %s", email, e)
            raise AuthError(getattr(e, "message", None) or str(e)) from e

        user_id = response.user.id if response.user is not None else None
        logger.info("User %s signed up", user_id)
        return {
            "message": "Check email to continue sign in process",
            "user_id": user_id,
        }

    def sign_out(self, token: str) -> None:
        """Revoke the session behind an access token (needs the service-role key)."""
        try:
            self.admin_client.auth.admin.sign_out(token)
        except Exception as e:
            logger.warning("Sign out failed: %s", e)
            raise AuthError(getattr(e, "message", None) or str(e)) from e

"""
Identity check for API requests.

The frontend signs in with Supabase (supabase.auth.signInWithPassword) or
Firebase and sends the resulting JWT in the Authorization header. Each
provider below verifies that JWT and resolves the caller to a User. The
provider is built once in `create_app` and kept on `app.state`, so either
backing service can be swapped without touching the routes.
"""
import logging
import time
from typing import Any, Dict, Optional

import requests
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.config import Settings
from app.core.errors import AuthError

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our AuthError (401), not a bare 403
security = HTTPBearer(auto_error=False)

FIREBASE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)


class User:
    """User model extracted from a verified token."""
    def __init__(self, user_id: str, email: Optional[str] = None, role: Optional[str] = None):
        self.id = user_id
        self.email = email
        self.role = role or "user"


class IdentityProvider:
    """Resolves a bearer token to a User or raises AuthError."""

    name = "base"

    def verify_token(self, token: str) -> Dict[str, Any]:
        raise NotImplementedError

    def get_current_user(self, token: str) -> User:
        if not token:
            raise AuthError("Not authenticated")
        payload = self.verify_token(token)
        user_id = payload.get("sub") or payload.get("user_id")
        if not user_id:
            raise AuthError("Could not validate user")
        return User(user_id=str(user_id), email=payload.get("email"), role=payload.get("role"))


class SupabaseIdentityProvider(IdentityProvider):
    """
    Verifies Supabase access tokens.

    Newer Supabase projects sign with ES256/RS256 and publish the public keys
    at the JWKS endpoint; legacy projects sign with HS256 using the project's
    JWT secret.
    """

    name = "supabase"

    def __init__(self, supabase_url: str, jwt_secret: Optional[str] = None, http=requests):
        self.supabase_url = (supabase_url or "").rstrip("/")
        self.jwt_secret = jwt_secret
        self._http = http
        self._jwks: Optional[Dict[str, Any]] = None

    def get_jwks(self) -> Dict[str, Any]:
        """Fetch (and cache) the project's JSON Web Key Set."""
        if self._jwks is not None:
            return self._jwks
        if not self.supabase_url:
            raise AuthError("Supabase Auth is not configured")
        jwks_url = f"{self.supabase_url}/auth/v1/.well-known/jwks.json"
        try:
            response = self._http.get(jwks_url, timeout=10)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Failed to fetch JWKS from Supabase: %s", e)
            raise AuthError("Could not verify token: identity provider unreachable") from e
        self._jwks = response.json()
        return self._jwks

    def verify_token(self, token: str) -> Dict[str, Any]:
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "HS256":
                if not self.jwt_secret:
                    raise AuthError("Invalid authentication credentials")
                key: Any = self.jwt_secret
                algorithms = ["HS256"]
            else:
                key = self.get_jwks()
                algorithms = ["ES256", "RS256"]
            return jwt.decode(
                token,
                key,
                algorithms=algorithms,
                audience="authenticated",  # Supabase uses "authenticated" as audience
                options={"verify_aud": True},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthError("Token has expired") from e
        except JWTError as e:
            logger.warning("Rejected Supabase token: %s", e)
            raise AuthError(f"Invalid authentication credentials: {e}") from e


class FirebaseIdentityProvider(IdentityProvider):
    """
    Verifies Firebase ID tokens against Google's published x509 certificates.

    python-jose accepts Google's {kid: certificate} mapping directly as the key.
    """

    name = "firebase"
    CERT_TTL_SECONDS = 3600

    def __init__(self, project_id: Optional[str], http=requests):
        self.project_id = project_id
        self._http = http
        self._certs: Optional[Dict[str, str]] = None
        self._certs_fetched_at = 0.0

    def get_certs(self) -> Dict[str, str]:
        fresh = time.monotonic() - self._certs_fetched_at < self.CERT_TTL_SECONDS
        if self._certs is not None and fresh:
            return self._certs
        try:
            response = self._http.get(FIREBASE_CERTS_URL, timeout=10)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Failed to fetch Firebase signing certificates: %s", e)
            raise AuthError("Could not verify token: identity provider unreachable") from e
        self._certs = response.json()
        self._certs_fetched_at = time.monotonic()
        return self._certs

    def verify_token(self, token: str) -> Dict[str, Any]:
        if not self.project_id:
            raise AuthError("Firebase Auth is not configured")
        try:
            return jwt.decode(
                token,
                self.get_certs(),
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=f"https://securetoken.google.com/{self.project_id}",
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthError("Token has expired") from e
        except JWTError as e:
            logger.warning("Rejected Firebase token: %s", e)
            raise AuthError(f"Invalid authentication credentials: {e}") from e


def build_identity_provider(settings: Settings) -> IdentityProvider:
    provider = (settings.AUTH_PROVIDER or "supabase").lower()
    if provider == "firebase":
        return FirebaseIdentityProvider(settings.FIREBASE_PROJECT_ID)
    if provider == "supabase":
        return SupabaseIdentityProvider(settings.SUPABASE_URL, settings.SUPABASE_JWT_SECRET)
    raise ValueError(f"Unknown AUTH_PROVIDER: {settings.AUTH_PROVIDER}")


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> User:
    """
    FastAPI dependency resolving the caller.

    Usage in route:
        @router.get("/protected")
        def protected_route(current_user: User = Depends(get_current_user)):
            return {"user_id": current_user.id}
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Not authenticated")
    return provider.get_current_user(credentials.credentials)

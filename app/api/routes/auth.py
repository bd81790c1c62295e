from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, Field

from app.api.deps import get_auth_actions
from app.core.auth import User, get_current_user, security
from app.core.errors import AuthError
from app.services.supabase_auth import SupabaseAuthActions

router = APIRouter(prefix="/auth", tags=["auth"])


class Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=128)


@router.post("/login")
def login(body: Credentials, actions: SupabaseAuthActions = Depends(get_auth_actions)):
    return actions.sign_in(body.email, body.password)


@router.post("/signup", status_code=201)
def signup(body: Credentials, actions: SupabaseAuthActions = Depends(get_auth_actions)):
    return actions.sign_up(body.email, body.password)


@router.post("/logout", status_code=204)
def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    actions: SupabaseAuthActions = Depends(get_auth_actions),
):
    if credentials is None:
        raise AuthError("Not authenticated")
    actions.sign_out(credentials.credentials)
    return None


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"id": current_user.id, "email": current_user.email, "role": current_user.role}

# app/core/auth.py
import logging
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.config import get_settings
from app.core.notices import NOTICE_HEADER
from app.database import get_session
from app.models.profile import Profile
from app.repositories.profile_repo import ProfileRepository
from app.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so anonymous visitors can browse the catalog.
bearer_scheme = HTTPBearer(auto_error=False)

profile_service = ProfileService(ProfileRepository())


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Profile | None:
    """
    Resolve the current identity from a Supabase JWT.

    This is the one place session state is read: every route that needs
    the caller depends on it, so there is no per-view copy of the session.

    Flow:
      1. If no Authorization header => anonymous => return None.
      2. Decode JWT => extract 'sub' (auth user id), 'email' and
         user_metadata.full_name.
      3. Convert 'sub' to UUID to match Profile.id type.
      4. Find the profile; if missing, provision it with role 'user'.

    Raises:
        HTTPException(401): if token is malformed or missing required claims.
        HTTPException(503): if the profile lookup hits a store error.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")

    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    # Supabase provides sub as a string; enforce UUID
    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    metadata = payload.get("user_metadata") or {}
    try:
        return profile_service.get_or_provision(
            session,
            sub_uuid,
            email=payload.get("email"),
            full_name=metadata.get("full_name"),
        )
    except SQLAlchemyError:
        logger.exception("Profile lookup failed for %s", sub_uuid)
        session.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to load session",
            headers={NOTICE_HEADER: "Failed to load session"},
        )


def require_auth(user: Profile | None = Depends(get_current_user)) -> Profile:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_admin(
    user: Profile = Depends(require_auth),
    session: Session = Depends(get_session),
) -> Profile:
    """
    Enforce admin role (a user_roles row with role='admin').

    The database policies remain the real boundary; this check only
    keeps non-admins from reaching admin handlers.

    A failed role lookup counts as "not an admin".

    Raises:
        HTTPException(403): if the caller is not an admin.
    """
    try:
        is_admin = profile_service.is_admin(session, user.id)
    except SQLAlchemyError:
        logger.exception("Role lookup failed for %s", user.id)
        session.rollback()
        is_admin = False

    if not is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: Admin only",
        )
    return user

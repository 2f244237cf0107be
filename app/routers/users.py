# app/routers/users.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.profile import Profile
from app.repositories.profile_repo import ProfileRepository
from app.schemas.profile import AdminProbe, ProfileRead, ProfileUpdate
from app.services.profile_service import ProfileService

router = APIRouter(prefix="/users", tags=["Users"])

service = ProfileService(ProfileRepository())


@router.get("/me", response_model=ProfileRead)
def read_me(current_user: Profile = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    The profile row is auto-created on first request (auth dependency).
    """
    return current_user


@router.patch("/me", response_model=ProfileRead)
def update_me(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Update the authenticated user's profile (full_name, phone).
    """
    return service.update_me(session, current_user, payload)


@router.get("/me/admin", response_model=AdminProbe)
def probe_admin(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Advisory admin check used by the front end to decide whether to
    show the admin dashboard. Admin routes check again on every call.
    """
    return service.admin_probe(session, current_user)

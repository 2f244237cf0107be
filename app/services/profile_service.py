# app/services/profile_service.py
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.models.profile import Profile
from app.repositories.profile_repo import ProfileRepository
from app.schemas.profile import AdminProbe, ProfileUpdate


def default_name_from_email(email: str | None) -> str | None:
    """
    Derive a default display name from email when sign-up
    metadata carries no full name.
    """
    if not email:
        return None
    if "@" in email:
        return email.split("@", 1)[0]
    return email


class ProfileService:
    """
    Business logic for profiles and roles.

    Responsibilities:
      - auto-provision profile + default role on first sight of an identity
      - self profile edits
      - admin probe
    """

    def __init__(self, repo: ProfileRepository):
        self.repo = repo

    def get_or_provision(
        self,
        session: Session,
        user_id: uuid.UUID,
        email: str | None,
        full_name: str | None = None,
    ) -> Profile:
        """
        Return the profile for `user_id`, creating it (with role 'user')
        if this identity has never been seen.

        Two first requests for the same identity can race on the insert;
        the loser rolls back and reads the winner's row.
        """
        profile = self.repo.get_by_id(session, user_id)
        if profile is not None:
            return profile

        profile = Profile(
            id=user_id,
            full_name=(full_name or "").strip() or default_name_from_email(email),
        )
        try:
            return self.repo.create_with_default_role(session, profile)
        except IntegrityError:
            session.rollback()
            existing = self.repo.get_by_id(session, user_id)
            if existing is None:
                raise
            return existing

    def update_me(
        self,
        session: Session,
        current_user: Profile,
        payload: ProfileUpdate,
    ) -> Profile:
        """Partial update: full_name and phone."""
        if payload.full_name is not None:
            current_user.full_name = payload.full_name

        if payload.phone is not None:
            current_user.phone = payload.phone

        return self.repo.update(session, current_user)

    def is_admin(self, session: Session, user_id: uuid.UUID) -> bool:
        return self.repo.has_role(session, user_id, "admin")

    def admin_probe(self, session: Session, current_user: Profile) -> AdminProbe:
        return AdminProbe(is_admin=self.is_admin(session, current_user.id))

    def grant_admin(self, session: Session, user_id: uuid.UUID) -> None:
        """
        Out-of-band admin grant (used by grant_admin.py).
        The profile must exist, i.e. the user has signed in at least once.
        """
        if self.repo.get_by_id(session, user_id) is None:
            raise LookupError(f"No profile for user {user_id}")
        self.repo.add_role(session, user_id, "admin")

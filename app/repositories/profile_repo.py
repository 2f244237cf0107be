# app/repositories/profile_repo.py
import uuid

from sqlmodel import Session, select

from app.models.profile import Profile, UserRole
from app.schemas.profile import Role


class ProfileRepository:
    """
    Data access layer for profiles and user_roles.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Profiles -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> Profile | None:
        """Return a Profile by primary key, or None if not found."""
        return session.get(Profile, user_id)

    def create_with_default_role(
        self,
        session: Session,
        profile: Profile,
        role: Role = "user",
    ) -> Profile:
        """
        Insert a profile together with its first role row,
        in one transaction (what the signup trigger does on Supabase).
        """
        session.add(profile)
        session.flush()
        session.add(UserRole(user_id=profile.id, role=role))
        session.commit()
        session.refresh(profile)
        return profile

    def update(self, session: Session, profile: Profile) -> Profile:
        """Persist changes to an existing Profile."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    # ----- Roles -----

    def has_role(self, session: Session, user_id: uuid.UUID, role: Role) -> bool:
        stmt = select(UserRole).where(
            UserRole.user_id == user_id,
            UserRole.role == role,
        )
        return session.exec(stmt).first() is not None

    def add_role(self, session: Session, user_id: uuid.UUID, role: Role) -> UserRole:
        """
        Grant a role. Idempotent: returns the existing row if present.
        """
        stmt = select(UserRole).where(
            UserRole.user_id == user_id,
            UserRole.role == role,
        )
        existing = session.exec(stmt).first()
        if existing is not None:
            return existing
        user_role = UserRole(user_id=user_id, role=role)
        session.add(user_role)
        session.commit()
        session.refresh(user_role)
        return user_role

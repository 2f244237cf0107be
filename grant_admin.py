# grant_admin.py
import sys
import uuid

from sqlmodel import Session

from app.database import engine
from app.repositories.profile_repo import ProfileRepository
from app.services.profile_service import ProfileService


def main():
    if len(sys.argv) != 2:
        print("Usage: python grant_admin.py <user-uuid>")
        sys.exit(2)

    try:
        user_id = uuid.UUID(sys.argv[1])
    except ValueError:
        print(f"Not a UUID: {sys.argv[1]}")
        sys.exit(2)

    service = ProfileService(ProfileRepository())
    with Session(engine) as session:
        try:
            service.grant_admin(session, user_id)
        except LookupError as e:
            print(f"{e}. The user must sign in once before being promoted.")
            sys.exit(1)

    print(f"Granted admin to {user_id}.")


if __name__ == "__main__":
    main()

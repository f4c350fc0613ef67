import sys
from getpass import getpass

from tracker.db.session import SessionLocal, engine
from tracker.db.base import Base
from tracker.db.models.user import UserRole
from tracker.utils.seed import ensure_user

def create_admin(name: str, email: str):
    Base.metadata.create_all(bind=engine)

    password = getpass(f"Password for {email}: ")
    if len(password) < 6:
        print("Password must be at least 6 characters.")
        sys.exit(1)

    db = SessionLocal()
    try:
        user = ensure_user(db, name, email, password, role=UserRole.ADMIN.value)
        print(f"Admin user ready: {user.name} <{user.email}> (role {user.role})")
    finally:
        db.close()

if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python create_user.py <name> <email>")
        sys.exit(1)
    create_admin(sys.argv[1], sys.argv[2])

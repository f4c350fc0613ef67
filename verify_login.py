import sys
from getpass import getpass

from tracker.db.session import SessionLocal
from tracker.db.models.user import User
from tracker.core.security import verify_password

def verify_login(email: str):
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user:
            print(f"User '{email}' does not exist in the database.")
            return

        print(f"User '{email}' found. Role: {user.role}")
        if verify_password(getpass("Password to check: "), user.hashed_password):
            print("Password works!")
        else:
            print("Password invalid.")
    finally:
        db.close()

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python verify_login.py <email>")
        sys.exit(1)
    verify_login(sys.argv[1])

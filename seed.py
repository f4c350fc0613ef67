import os

from tracker.db.session import SessionLocal, engine
from tracker.db.base import Base
from tracker.utils.seed import seed_catalog, ensure_user

TEAM = [
    ("Alice", "alice@example.com"),
    ("Bob", "bob@example.com"),
    ("Charlie", "charlie@example.com"),
    ("Diana", "diana@example.com"),
]

def seed():
    print("Creating tables...")
    Base.metadata.create_all(bind=engine)

    password = os.getenv("SEED_PASSWORD")
    db = SessionLocal()
    try:
        created = seed_catalog(db)
        print(f"Buckets created: {created}")

        if not password:
            print("SEED_PASSWORD not set, skipping team members.")
            return
        for name, email in TEAM:
            user = ensure_user(db, name, email, password)
            print(f"Team member ready: {user.name} <{user.email}>")
    finally:
        db.close()
    print("Seeding completed.")

if __name__ == "__main__":
    seed()

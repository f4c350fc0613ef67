from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from tracker.core.config import settings


def enable_sqlite_foreign_keys(engine):
    # SQLite ignores FOREIGN KEY clauses unless enabled per connection
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    pool_pre_ping=not settings.USE_SQLITE,
    connect_args={"check_same_thread": False} if settings.USE_SQLITE else {}
)

if settings.USE_SQLITE:
    enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

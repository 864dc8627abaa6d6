# attendance_api/db/session.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from attendance_api.core.config import Settings


class Database:
    """Engine and session factory, created once per application."""

    def __init__(self, settings: Settings):
        url = settings.DATABASE_URL
        kwargs = {}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, **kwargs)
        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_fk)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        from attendance_api.db.base import Base
        import attendance_api.db.models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()


def _enable_sqlite_fk(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

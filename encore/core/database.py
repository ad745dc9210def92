"""Database engine and session management for the document store.

The engine backs :class:`encore.store.sql.SqlDocumentStore`, which keeps every
collection in one ``storeddocument`` table. SQLite is the default target.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: readers are not blocked while the
      summary reconcile job rewrites ``event_attendance`` documents.

    - **Foreign Keys**: enabled for parity with other SQLite deployments;
      the document table itself declares none.

    - **check_same_thread=False**: FastAPI may hand a session to a worker
      thread other than the one that opened the connection.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from encore.core.config import settings

connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


@sa_event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    if not settings.database_url.startswith("sqlite"):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_and_tables():
    """Create all database tables."""
    # Register the document table on SQLModel.metadata before create_all.
    import encore.store.sql  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session

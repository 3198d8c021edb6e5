"""Module: session."""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from vetclinic.core.config import settings

engine = create_engine(settings.database_url, pool_pre_ping=True, future=True)


# PostgreSQL only: cap runtime of every statement on this connection.
@event.listens_for(engine, "connect")
def _set_statement_timeout(dbapi_connection, connection_record):
    if engine.dialect.name != "postgresql" or not settings.db_statement_timeout_ms:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute(f"SET statement_timeout = {int(settings.db_statement_timeout_ms)}")
    cursor.close()


SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

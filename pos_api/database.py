# pos_api/database.py

import logging

from fastapi import HTTPException, Request, status
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from pos_api.core.config import settings

logger = logging.getLogger("pos_api")


class Base(DeclarativeBase):
    pass


def build_engine(database_url: str = settings.DATABASE_URL) -> Engine:
    """
    Create the engine for the shared store.

    SQLite gets foreign key enforcement and IMMEDIATE transactions so
    that two units of work writing the same rows are serialized by the
    database itself. Other backends rely on SELECT ... FOR UPDATE.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    engine = create_engine(
        database_url,
        connect_args={
            "check_same_thread": False,
            "timeout": settings.DB_LOCK_TIMEOUT_SECONDS,
        },
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None

        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False)


def get_db(request: Request):
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def commit_or_raise(db: Session, action: str):
    try:
        db.commit()

    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Unable to {action}: conflicting record",
        )

    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Unable to {action}")
        raise HTTPException(status_code=500, detail=f"Unable to {action}")

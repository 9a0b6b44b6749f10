from threading import Lock

from fastapi import HTTPException, status
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config


def _connect_args(url: str) -> dict:
    # SQLite connections are created on one thread and used on FastAPI's worker threads.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    config.DATABASE_URL,
    echo=config.DATABASE_ECHO,
    connect_args=_connect_args(config.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_student_schema_checked = False


def ensure_student_schema(bind: Engine | None = None) -> None:
    global _student_schema_checked

    if _student_schema_checked and bind is None:
        return

    with _schema_lock:
        if _student_schema_checked and bind is None:
            return

        from backend.models.student import Student

        Base.metadata.create_all(bind=bind or engine, tables=[Student.__table__])

        if bind is None:
            _student_schema_checked = True


def ensure_database_ready() -> None:
    try:
        ensure_student_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Database error.',
        ) from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['BCRYPT_ROUNDS'] = '4'

from backend.auth.sessions import InMemorySessionStore  # noqa: E402
from backend.database import Base, ensure_student_schema, get_db  # noqa: E402
from backend.main import create_app  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    ensure_student_schema(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def testing_session_local(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(testing_session_local):
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def app(testing_session_local, session_store):
    application = create_app(session_store=session_store)

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def student_payload():
    return {
        'firstName': 'Ada',
        'lastName': 'Lovelace',
        'username': 'ada',
        'email': 'ada@example.edu',
        'contact': '09171234567',
        'password': 'analytical-engine',
    }

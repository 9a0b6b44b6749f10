import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backend.auth.sessions import InMemorySessionStore, SessionStore
from backend.core import config
from backend.database import ensure_student_schema
from backend.routes import auth_routes, student_routes

logger = logging.getLogger(__name__)


def create_app(session_store: SessionStore | None = None) -> FastAPI:
    app = FastAPI(title='Student Registry API')

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.state.session_store = session_store if session_store is not None else InMemorySessionStore()

    @app.on_event('startup')
    def initialize_database() -> None:
        config.validate_runtime_config()
        try:
            ensure_student_schema()
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DATABASE_URL.')

    @app.get('/api/status')
    def api_status():
        return {'status': 'Student registry API running'}

    app.include_router(auth_routes.router, prefix='/api')
    app.include_router(student_routes.router, prefix='/api')

    return app


app = create_app()

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from clubsphere.core import config
from clubsphere.database import build_engine, build_session_factory, create_tables
from clubsphere.routes import admin_routes, announcement_routes, auth_routes, club_routes, membership_routes
from clubsphere.seed import seed_demo_data
from clubsphere.storage.base import ConflictError, Storage
from clubsphere.storage.memory import MemoryStorage
from clubsphere.storage.sessions import SessionStore
from clubsphere.storage.sql import SqlStorage

logger = logging.getLogger(__name__)


def build_storage() -> Storage:
    if config.STORAGE_BACKEND == 'sql':
        engine = build_engine(config.DATABASE_URL)
        create_tables(engine)
        return SqlStorage(build_session_factory(engine))
    return MemoryStorage()


def create_app(storage: Storage | None = None, sessions: SessionStore | None = None) -> FastAPI:
    config.validate_runtime_config()

    app = FastAPI(title='ClubSphere API')
    # Without an explicit store, the configured one is built at startup, not at import.
    app.state.storage = storage
    app.state.sessions = sessions if sessions is not None else SessionStore(
        ttl_seconds=config.SESSION_TTL_SECONDS,
        check_period_seconds=config.SESSION_CHECK_PERIOD_SECONDS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @app.on_event('startup')
    def initialize_storage() -> None:
        if app.state.storage is None:
            app.state.storage = build_storage()
            logger.info('Using %s storage backend', config.STORAGE_BACKEND)

        if not config.SEED_DEMO_DATA:
            return
        try:
            seed_demo_data(app.state.storage, config.DEMO_PASSWORD)
        except SQLAlchemyError:
            logger.exception('Seeding demo data failed. Check DATABASE_URL and database credentials.')

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={'detail': str(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception('Database error while handling %s %s', request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={'detail': 'Database unavailable. Verify DATABASE_URL and database credentials.'},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception('Unhandled error while handling %s %s', request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'detail': 'Internal server error'},
        )

    @app.get('/')
    def root():
        return {'status': 'ClubSphere API Running'}

    app.include_router(auth_routes.router, prefix='/api/auth')
    app.include_router(club_routes.router, prefix='/api/clubs')
    app.include_router(membership_routes.router, prefix='/api')
    app.include_router(announcement_routes.router, prefix='/api')
    app.include_router(admin_routes.router, prefix='/api/admin')

    return app


app = create_app()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from attendance_api.api import attendance, reports
from attendance_api.api.errors import add_error_handlers
from attendance_api.core.config import Settings
from attendance_api.core.security import build_token_verifier
from attendance_api.crud.attendance import SessionLocks
from attendance_api.db.session import Database

logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


def create_app(settings: Settings | None = None, token_verifier=None) -> FastAPI:
    """Builds the app; everything shared lives on app.state and is created here once."""
    settings = settings or Settings()
    logging.basicConfig(level=settings.LOG_LEVEL,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    database = Database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(title="Attendance Reports API", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.token_verifier = token_verifier or build_token_verifier(settings)
    app.state.session_locks = SessionLocks()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_error_handlers(app)

    app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
    app.include_router(attendance.router, prefix="/api/attendance", tags=["attendance"])

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from coachtrack.config import LOG_LEVEL, RUN_MIGRATIONS_ON_STARTUP, UPLOAD_URL_PREFIX
from coachtrack.database import engine, Base
from coachtrack.exceptions import CoachTrackError, StorageError
import coachtrack.models  # noqa: F401  registers every table on Base.metadata
from coachtrack.api import ai, login, meals, plan_versions, sessions, templates, trainer
from coachtrack.services.storage_service import upload_root

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


# Run Alembic migrations on startup
def run_migrations():
    """Apply pending Alembic migrations, falling back to create_all."""
    try:
        from alembic.config import Config
        from alembic import command
        alembic_cfg = Config(str(ALEMBIC_INI))
        # Keep the logging set up by basicConfig above
        alembic_cfg.attributes["configure_logger"] = False
        command.upgrade(alembic_cfg, "head")
        logger.info("[Alembic] Migrations applied successfully")
    except Exception as e:
        logger.exception(f"[Alembic] Migration failed, falling back to create_all: {e}")
        Base.metadata.create_all(bind=engine)


if RUN_MIGRATIONS_ON_STARTUP:
    run_migrations()

app = FastAPI(title="CoachTrack API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CoachTrackError)
def handle_domain_error(request: Request, exc: CoachTrackError):
    if isinstance(exc, StorageError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} refused ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(login.router)
app.include_router(plan_versions.diet_router)
app.include_router(plan_versions.workout_router)
app.include_router(sessions.workout_session_router)
app.include_router(sessions.diet_session_router)
app.include_router(trainer.router)
app.include_router(templates.diet_template_router)
app.include_router(templates.workout_template_router)
app.include_router(meals.router)
app.include_router(ai.router)

# Uploaded evidence (cardio machine photos)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=str(upload_root())), name="uploads")


# Root endpoint
@app.get("/")
def root():
    return {
        "message": "Welcome to CoachTrack API",
        "docs": "/docs",
        "redoc": "/redoc"
    }


# Health check endpoint
@app.get("/health")
def health_check():
    return {"status": "healthy", "message": "API is running"}

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from docportal.config.settings import settings
from docportal.core.exceptions import register_exception_handlers
from docportal.core.middleware import limit_upload_size
from docportal.core.storage import CloudinaryStorage
from docportal.db.base import create_tables, get_engine, get_session_factory

# -------------------------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application start-up & shutdown hooks."""
    # ------------------------------------------------------------------ start‑up -----
    logger.info("Application startup …")

    engine = None
    try:
        logger.info("Initializing Database Engine...")
        engine = await get_engine(settings.database_url)
        app.state.engine = engine
        if settings.create_tables:
            await create_tables(engine)
            logger.info("Database tables ensured.")
        app.state.session_factory = await get_session_factory(engine)
        logger.info("DB session factory ready.")
    except Exception as e:
        logger.critical(f"CRITICAL ERROR DURING STARTUP INITIALIZATIONS: {e}", exc_info=True)
        if engine:
            await engine.dispose()
        raise

    app.state.blob_storage = CloudinaryStorage(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
    )
    if not app.state.blob_storage.configured:
        logger.warning("Cloudinary credentials are not set; file uploads will fail.")

    # ------------------------------------------------ give control back
    yield

    # ------------------------------------------------ shutdown --------
    logger.info("Application shutdown …")
    try:
        await engine.dispose()
        logger.info("DB engine disposed")
    except Exception:
        logger.exception("Error disposing DB engine")
    logger.info("Shutdown complete")


# -------------------------------------------------------------------------------------
# FastAPI application instance
# -------------------------------------------------------------------------------------
app = FastAPI(title="Document Submission Portal", lifespan=lifespan)

# size guard first so the CORS middleware wraps its 413s
app.middleware("http")(limit_upload_size)

# CORS -------------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(o) for o in settings.cors_origins],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Authorization"],
)

register_exception_handlers(app)


# ----------------------------------------------------------------- health‑check -----
@app.get("/health")
async def health_check(request: Request):
    return {
        "status": "ok",
        "blob_storage": "configured" if request.app.state.blob_storage.configured else "missing",
    }


# ------------------------------------------------------------------- routes ---------
from docportal.routes.auth.router import router as auth_router  # noqa: E402  (after app creation)
from docportal.routes.documents.router import router as documents_router  # noqa: E402
from docportal.routes.doctor.router import router as doctor_router  # noqa: E402
from docportal.routes.students.router import router as students_router  # noqa: E402
from docportal.routes.messages.router import router as messages_router  # noqa: E402
from docportal.routes.users.router import router as users_router  # noqa: E402

app.include_router(auth_router)
app.include_router(documents_router)
app.include_router(doctor_router)
app.include_router(students_router)
app.include_router(messages_router)
app.include_router(users_router)

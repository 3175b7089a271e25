import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from healthjournal.core.config import Base, engine, settings
from healthjournal.core.exceptions import register_exception_handlers
from healthjournal.api.routers import auth, journal
from healthjournal import models  # noqa: F401  registers tables on Base.metadata

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("healthjournal")

# =====================================================================
# CREATE APP
# =====================================================================

app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    description="Personal health journal with offline cache and migration",
    version="1.0.0",
)

# =====================================================================
# CORS MIDDLEWARE - MUST BE FIRST!
# =====================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Journal-Tier"],
)

logger.info(f"CORS allowed origins: {settings.CORS_ORIGINS}")

# =====================================================================
# DATABASE INITIALIZATION
# =====================================================================

Base.metadata.create_all(bind=engine)

# =====================================================================
# ERRORS
# =====================================================================

register_exception_handlers(app)

# =====================================================================
# HEALTH CHECK (before routers)
# =====================================================================


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# =====================================================================
# ROUTES
# =====================================================================

app.include_router(auth.router)
app.include_router(journal.router)

# =====================================================================
# ROOT ENDPOINT
# =====================================================================


@app.get("/")
def root():
    """API root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "auth": "/auth",
            "journal": "/journal",
        },
    }

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# ✅ Import All API Routes
from app.api.routes import ai, auth, health, usage, user

from app.core import config
from app.core.errors import register_error_handlers
from app.core.logging_config import sanitize_log_data, setup_logging
from app.db.session import SessionLocal
from app.services.container import build_services

logger = logging.getLogger(__name__)


# ============================================
# ✅ LIFESPAN: LOGGING, SCHEMA, PROVIDER CLIENTS
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)

    if config.RUN_MIGRATIONS:
        from app.db.migrate import run_migrations
        run_migrations()
    else:
        from app.db.init_db import init_db
        init_db()

    app.state.services = build_services(SessionLocal)
    settings = sanitize_log_data({
        "database_url": config.DATABASE_URL,
        "text_model": config.TEXT_MODEL,
        "free_usage_limit": config.FREE_USAGE_LIMIT,
    })
    logger.info(f"Creator AI gateway started: {settings}")
    try:
        yield
    finally:
        app.state.services.close()
        logger.info("Creator AI gateway stopped")


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Creator AI", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)

register_error_handlers(app)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(ai.router)
app.include_router(user.router)
app.include_router(usage.router)
app.include_router(health.router)


# ============================================
# ✅ ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "Creator AI API running"}

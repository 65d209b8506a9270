from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import time

from app.core.config import settings
from app.core.database import db_manager
from app.core.exceptions import setup_exception_handlers
from app.core.logging import setup_logging
from app.modules.users.router import router as auth_router
from app.modules.users.services import UserService
from app.modules.farmers.router import router as farmers_router
from app.modules.loans.router import router as loans_router
from app.modules.products.router import router as products_router

setup_logging()
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    # Startup
    db_manager.init(settings.DATABASE_URL)
    await db_manager.create_all()

    async with db_manager.session_factory() as session:
        await UserService(session).ensure_admin()

    logger.info(f"{settings.APP_NAME} API started ({settings.ENVIRONMENT})")

    yield

    # Shutdown
    await db_manager.dispose()


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Farm produce marketplace and agri-finance backend",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include routers
app.include_router(auth_router)
app.include_router(farmers_router)
app.include_router(loans_router)
app.include_router(products_router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "OK",
        "message": f"{settings.APP_NAME} Backend is running",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3)
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "success": True,
        "message": f"{settings.APP_NAME} API Server",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)

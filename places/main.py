"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from places.config import get_settings
from places.database import engine, Base, AsyncSessionLocal, check_db_connectivity, get_db
from places.models import Scratchpad, SCRATCHPAD_ID
from places.api import restaurants, lookups, stats, scratchpad, maintenance
from places.utils.helpers import utc_timestamp
from places.utils.logger import configure_logging, get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database ready at {settings.DATABASE_URL}")

    # The scratchpad is a singleton row; make sure it exists
    async with AsyncSessionLocal() as session:
        await session.execute(
            insert(Scratchpad)
            .values(id=SCRATCHPAD_ID, content="")
            .on_conflict_do_nothing(index_elements=["id"])
        )
        await session.commit()

    logger.info(f"{settings.APP_NAME} API running on http://{settings.HOST}:{settings.PORT}")

    yield

    await engine.dispose()
    logger.info("Database connection closed")

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(restaurants.router, prefix="/api/restaurants", tags=["Restaurants"])
app.include_router(lookups.router, prefix="/api", tags=["Lookups"])
app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])
app.include_router(scratchpad.router, prefix="/api/scratchpad", tags=["Scratchpad"])
app.include_router(maintenance.router, prefix="/api/maintenance", tags=["Maintenance"])


@app.get("/api/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    db_ok = await check_db_connectivity(db)
    return {
        "status": "ok",
        "message": f"{settings.APP_NAME} API server running",
        "environment": settings.ENVIRONMENT,
        "timestamp": utc_timestamp(),
        "database": "SQLite connected" if db_ok else "unavailable",
    }


@app.exception_handler(SQLAlchemyError)
async def storage_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Storage failures outside the writers' own handling; message passed through."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "places.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )

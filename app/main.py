import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.config import settings, check_ai_analysis_configuration
from app.core.error_handling import ErrorHandlingMiddleware
from app.database import Base, engine
from app import models  # noqa: F401  registers tables on Base.metadata
from app.routers import health_prediction

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Creates tables and reports optional AI configuration before serving.
    """
    logger.info("🚀 Starting Health Trends Backend...")

    logger.info("📊 Creating database tables...")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database tables created")
    except Exception as e:
        logger.error(f"❌ Failed to create tables: {e}")
        raise

    if check_ai_analysis_configuration():
        logger.info("✅ AI risk narratives enabled")
    logger.info(
        "ℹ️  Health prediction mode: %s",
        "demo" if settings.HEALTH_PREDICTION_DEMO_MODE else "live"
    )

    logger.info("🎉 Health Trends Backend startup complete!")

    yield

    logger.info("🛑 Shutting down Health Trends Backend...")
    engine.dispose()
    logger.info("✅ Shutdown complete")


app = FastAPI(
    title="Health Trends - Patient Health Prediction API",
    description="Health trend prediction, risk scoring and interventions for patient dashboards",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health trend prediction per patient
app.include_router(health_prediction.router)


@app.get("/")
async def root():
    return {
        "message": "Health Trends API",
        "version": "1.0.0",
        "status": "operational"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "prediction_mode": "demo" if settings.HEALTH_PREDICTION_DEMO_MODE else "live"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )

"""FastAPI app for the carousel layout service"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carousel.config import get_settings
from carousel.routes import router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration."""
    logger.info(f"Starting carousel service (fonts: {settings.font_path}, workers: {settings.render_workers})")
    yield
    logger.info("Shutting down...")

app = FastAPI(title="Carousel Layout Service", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(router, prefix="/api")

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bridge_pricing.config import settings
from bridge_pricing.models.policy import DEFAULT_POLICY
from bridge_pricing.api.routes import health, pricing

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.getLogger("bridge_pricing").setLevel(settings.LOG_LEVEL)
    logger.info(
        "Pricing engine started: base rate %.2f%%, solver step £%.0f",
        settings.DEFAULT_BASE_RATE_PCT, DEFAULT_POLICY.solver_step,
    )
    yield


app = FastAPI(title="Bridge Pricing Engine", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api")
app.include_router(pricing.router, prefix="/api")

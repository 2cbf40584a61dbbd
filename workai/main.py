import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from workai.api.v1.health import router as health_router
from workai.api.v1.jobs import router as jobs_router
from workai.core.cors import cors_allow_credentials, cors_allow_origin_regex, cors_allowed_origins
from workai.core.rate_limit import limiter
from workai.core.config import settings
from dotenv import load_dotenv
from workai.core.lifespan import lifespan

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="WorkAI Pricing API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_credentials=cors_allow_credentials(),
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.get("/", include_in_schema=False)
async def root():
    return {"ok": True, "service": settings.service_name, "status": "alive"}


app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(jobs_router, prefix="/api", tags=["Jobs"])

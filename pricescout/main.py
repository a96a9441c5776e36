import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pricescout.deps import get_settings
from pricescout.errors import PipelineError
from pricescout.logging_config import setup_logging
from pricescout.middleware import RequestLoggingMiddleware
from pricescout.ratelimit import limiter
from pricescout.routes import gemini

settings = get_settings()

# Sentry
if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        traces_sample_rate=0.1,
        send_default_pii=False,
    )

logger = setup_logging()

app = FastAPI(title="PriceScout API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=exc.headers)


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["POST"],
    allow_headers=["Content-Type"],
)
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(gemini.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok"}

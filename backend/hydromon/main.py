import json
import logging
import time
from uuid import uuid4

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy import text
from sqlalchemy.orm import Session

from hydromon.access.operation import describe_errors
from hydromon.config import get_settings
from hydromon.database import get_db
from hydromon.errors import AccessError, ErrorKind
from hydromon.routers import auth_router, devices_router, telemetry_router, users_router

settings = get_settings()
logger = logging.getLogger("hydromon.api")
logging.basicConfig(level=settings.log_level.upper())

# Rate limiter
limiter = Limiter(key_func=get_remote_address)

app = FastAPI(
    title="HydroMon API",
    description="Water-quality monitoring dashboard: devices, readings, alert rules and pump control",
    version="1.0.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


@app.exception_handler(AccessError)
async def access_error_handler(request: Request, exc: AccessError):
    return JSONResponse(status_code=exc.http_status, content={"error": exc.to_dict()})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    error = AccessError(ErrorKind.VALIDATION_FAILED, describe_errors(errors), detail=errors)
    return JSONResponse(status_code=error.http_status, content={"error": error.to_dict()})


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Set basic security headers for all API responses."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"
    return response


@app.middleware("http")
async def structured_logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    req_id = request.headers.get("X-Request-ID", str(uuid4()))
    request.state.request_id = req_id

    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers["X-Request-ID"] = req_id
        return response
    finally:
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(json.dumps({
            "request_id": req_id,
            "path": request.url.path,
            "method": request.method,
            "status": status_code,
            "duration_ms": duration_ms,
        }))


# Include routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(devices_router)
app.include_router(telemetry_router)

Instrumentator().instrument(app).expose(app, include_in_schema=False)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Liveness plus a database round trip."""
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check database probe failed")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "degraded", "db": "error"},
        )
    return {"status": "healthy", "db": "ok"}


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": "HydroMon API",
        "version": "1.0.0",
        "docs": "/docs",
        "auth": {
            "register": "/auth/register",
            "login": "/auth/login",
            "session": "/auth/session",
        },
        "devices": "/devices",
    }

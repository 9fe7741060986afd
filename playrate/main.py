"""PlayRate FastAPI application."""

import logging
import secrets
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Configure logging so our INFO messages appear in container logs
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

from playrate.config import settings
from playrate.database import close_db, init_db
from playrate.errors import ServiceError
from playrate.routers import products, users

logger = logging.getLogger(__name__)

DEFAULT_SECRET_SENTINEL = "change-me-to-a-random-string"


def _ensure_secret_key() -> None:
    """Auto-generate a persistent secret key if the user hasn't set one."""
    if settings.secret_key != DEFAULT_SECRET_SENTINEL:
        return  # PLAYRATE_SECRET_KEY was set explicitly

    key_file = settings.data_dir / ".secret_key"
    if key_file.exists():
        stored = key_file.read_text().strip()
        if stored:
            settings.secret_key = stored
            logger.info("Loaded auto-generated secret key from %s", key_file)
            return

    new_key = secrets.token_hex(32)
    key_file.write_text(new_key)
    settings.secret_key = new_key
    logger.warning(
        "Generated new secret key (saved to %s). "
        "Set PLAYRATE_SECRET_KEY env var to use your own.",
        key_file,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    _ensure_secret_key()
    await init_db()
    yield
    await close_db()


app = FastAPI(
    title="PlayRate",
    description="Game catalog with playtime-weighted community ratings",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: localhost defaults plus any extra origins from PLAYRATE_CORS_ORIGINS
_cors_origins = ["http://localhost:5173", "http://localhost:3000"]
if settings.cors_origins:
    _cors_origins.extend(o.strip() for o in settings.cors_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error responses: always {"message": ...} ─────────────────────────────────

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    body = {"message": exc.message}
    reason = getattr(exc, "reason", None)
    if reason:
        body["reason"] = reason
    required_minutes = getattr(exc, "required_minutes", None)
    if required_minutes is not None:
        body["required_minutes"] = required_minutes
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={
            "message": message,
            "errors": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in errors
            ],
        },
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server Error"})


# API routers
app.include_router(users.router)
app.include_router(products.router)


# Health check (public, no auth)
@app.get("/api/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}


def run() -> None:
    """Serve the API with uvicorn on PLAYRATE_HOST:PLAYRATE_PORT."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

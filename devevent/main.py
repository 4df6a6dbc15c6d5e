from fastapi import FastAPI, Request, APIRouter
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from devevent.api.limiter import limiter
from devevent.api.v1.routes import (
    events as events_router,
    bookings as bookings_router,
    categories as categories_router,
    stats as stats_router,
    health as health_router,
)
from devevent.cache.redis_client import cache
from devevent.core.config import settings
from devevent.core.errors import DomainError
from devevent.core.logging import logger
from devevent.db.session import db_manager

app = FastAPI(title="DevEvent Hub")

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(events_router.router)
api_router.include_router(bookings_router.router)
api_router.include_router(categories_router.router)
api_router.include_router(stats_router.router)
api_router.include_router(health_router.router)

app.include_router(api_router)


def error_body(message: str, detail=None) -> dict:
    body = {"message": message}
    if detail:
        body["error"] = detail
    return body


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.code.value}): {exc}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed input is a client error (400) like every other validation failure
    errors = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content=error_body("Invalid request", errors))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error_body("Internal server error", str(exc)))


@app.on_event("shutdown")
async def on_shutdown():
    # The database connects lazily on first use; only teardown happens here
    await db_manager.dispose()
    await cache.close()

"""
# `pawmart/main.py` — Application entry point

## Overview
Builds the FastAPI app: logging, CORS, routers and the exception handlers
that turn every failure into `{"message": <code>, "detail": <text>}`.

---

## Routers
**Public / authenticated:**
- listings (`/listings`, `/listing/{id}`, `/latest-listings`, `/search`, `/user-listings`)
- `/orders`
- users (`/users`, `/user-profile`)

**Admin (prefix `/admin`):**
- `/admin/listings`, `/admin/users` — protected with `get_current_admin`.

---

## Error mapping
| Raised | Status | message |
|--------|--------|---------|
| `ApiError` subclasses | their own | their `code` |
| request validation | 400 | `invalid_input` |
| Firestore timeout / unavailable | 503 | `unavailable` |
| anything else | 500 | `internal_error` (no internal text leaked) |

---

## Startup
`get_settings()` is evaluated when the app is built, so a missing
`FIREBASE_PROJECT_ID` stops the process before it serves anything. Firebase
itself is initialized on startup.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from google.api_core import exceptions as gexc

from pawmart.config import Settings, get_settings, init_firebase
from pawmart.core.errors import ApiError, Internal, InvalidInput, Unavailable
from pawmart.routers import admin, listings, orders, users

logger = logging.getLogger("pawmart.errors")

RETRYABLE_STORE_ERRORS = (gexc.DeadlineExceeded, gexc.ServiceUnavailable, gexc.RetryError)


def _operation(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "name", None) or request.url.path


def _error_response(err: ApiError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=err.to_body(), headers=err.headers)


async def api_error_handler(request: Request, exc: ApiError):
    return _error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    err = InvalidInput("Request validation failed.")
    body = err.to_body()
    body["errors"] = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
    return JSONResponse(status_code=err.status_code, content=body)


async def store_error_handler(request: Request, exc: Exception):
    if isinstance(exc, RETRYABLE_STORE_ERRORS):
        logger.warning("store unavailable op=%s error=%s", _operation(request), type(exc).__name__)
        return _error_response(Unavailable())
    logger.error("store call failed op=%s error=%s", _operation(request), type(exc).__name__)
    return _error_response(Internal())


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error op=%s", _operation(request))
    return _error_response(Internal())


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Paw-Mart API",
        description="Listings and orders for a small pet marketplace.",
        version="1.0.0",
        debug=settings.debug,
    )

    # Configure CORS (allowed_origins from settings, "*" by default)
    allow_origins = [o.strip() for o in settings.allowed_origins.split(',')] if settings.allowed_origins else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(gexc.GoogleAPIError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(listings.router)
    app.include_router(orders.router)
    app.include_router(users.router)
    app.include_router(admin.admin_router, prefix="/admin")

    @app.get("/", include_in_schema=False)
    def root():
        return {"message": "Server is running fine!"}

    @app.on_event("startup")
    def _startup_firebase():
        init_firebase(settings)
        logger.info("firebase initialized project=%s", settings.firebase_project_id)

    return app


app = create_app()

# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pawmart.main:app", host="0.0.0.0", port=8000, reload=True)

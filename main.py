import logging
import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api import bookings
from app.core.config import get_cors_origins, settings
from app.core.env import get_app_env, is_local_env
from app.services.errors import BookingError, ValidationError
from database import Base, engine
from app import models  # noqa: F401

logger = logging.getLogger(__name__)

app = FastAPI(title="Seva Booking API", version="0.1.0")


def _should_create_all() -> bool:
    enable_flag = os.getenv("ENABLE_CREATE_ALL", "").lower() in {"1", "true", "yes"}
    if engine.url.get_backend_name() == "sqlite":
        return True
    return is_local_env() or enable_flag


@app.on_event("startup")
def on_startup() -> None:
    if _should_create_all():
        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as exc:
            logger.warning("Base.metadata.create_all failed; continuing without fatal error: %s", exc)
    else:
        logger.info(
            "Skipping Base.metadata.create_all on %s (APP_ENV=%s); run alembic upgrade head instead.",
            engine.url.get_backend_name(),
            get_app_env(),
        )


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.kind)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Unparseable JSON bodies get the same envelope as domain validation errors.
    error = ValidationError([], ["body"])
    error.message = "Request body could not be parsed"
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(settings),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(bookings.router, prefix=settings.base_path.rstrip("/"), tags=["bookings"])


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)

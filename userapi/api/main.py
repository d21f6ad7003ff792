# api/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from userapi.api.endpoints import users
from userapi.api.settings import settings
from userapi.db.connection import Database
from userapi.errors import StoreError


def create_app(database: Database) -> FastAPI:
    """Build the service around an already constructed gateway.

    The gateway is connected on startup unless the caller connected it
    beforehand, and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not database.is_connected:
            await database.connect()
        yield
        await database.close()

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.database = database

    # Any origin may call the mounted routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.include_router(users.router, prefix="/api/users", tags=["users"])

    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    return app


async def store_error_handler(request: Request, exc: StoreError):
    logging.error(f"{request.method} {request.url.path} failed: {exc}")
    return PlainTextResponse(str(exc), status_code=500)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Empty or unparseable bodies are a 400; well-formed JSON with bad fields stays a 422
    errors = exc.errors()
    if any(is_malformed_body(error) for error in errors):
        return JSONResponse({"detail": jsonable_encoder(errors)}, status_code=400)
    return await request_validation_exception_handler(request, exc)


def is_malformed_body(error) -> bool:
    if error.get("type") == "json_invalid":
        return True
    return error.get("type") == "missing" and tuple(error.get("loc", ())) == ("body",)

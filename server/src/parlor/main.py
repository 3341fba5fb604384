"""Parlor server."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from parlor.api import router
from parlor.api.deps import issue_session_cookie
from parlor.config import settings
from parlor.db import async_session, engine
from parlor.errors import ConstraintViolation, SessionExpired
from parlor.sessions import SessionReclaimer

# Non-standard status ("Login Time-out") the front end uses to drop its cookie
SESSION_EXPIRED_STATUS = 440

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The schema is managed by alembic: run `alembic upgrade head` first
    reclaimer = SessionReclaimer(async_session)
    reclaimer.start()
    app.state.reclaimer = reclaimer
    logger.info(
        "Session reclaimer started (timeout %ss, period %ss)",
        reclaimer.timeout,
        reclaimer.period,
    )

    yield

    await reclaimer.stop()
    await engine.dispose()


app = FastAPI(title="Parlor", version="0.1.0", lifespan=lifespan)

# Sends the cookie of a session issued mid-request, even on error responses
app.middleware("http")(issue_session_cookie)

# Allow frontend to connect
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConstraintViolation)
async def constraint_violation_handler(request: Request, exc: ConstraintViolation) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.reason})


@app.exception_handler(SessionExpired)
async def session_expired_handler(request: Request, exc: SessionExpired) -> JSONResponse:
    response = JSONResponse(
        status_code=SESSION_EXPIRED_STATUS,
        content={"detail": "Your session has expired."},
    )
    response.delete_cookie(settings.session_cookie_name)
    return response


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error while handling %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error."})


app.include_router(router)

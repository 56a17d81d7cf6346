from __future__ import annotations
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mentor_admin.config import settings
from mentor_admin.errors import ConsoleError
from mentor_admin.logging_setup import configure_logging
from mentor_admin.routes.system import router as system_router
from mentor_admin.routes.challenges import router as challenges_router
from mentor_admin.routes.tasks import router as tasks_router
from mentor_admin.routes.submissions import router as submissions_router
from mentor_admin.routes.badges import router as badges_router
from mentor_admin.routes.analytics import router as analytics_router
from mentor_admin.routes.raffle import router as raffle_router
import structlog

configure_logging()
log = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", env=settings.environment, version=settings.app_version, git_sha=settings.git_sha)
    yield
    log.info("shutdown")

app = FastAPI(
    title=f"{settings.app_display_name} API",
    version=settings.app_version,
    lifespan=lifespan,
    description=f"{settings.app_display_name} API for monthly mentorship challenges, submission review and badges",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system_router)
app.include_router(challenges_router)
app.include_router(tasks_router)
app.include_router(submissions_router)
app.include_router(badges_router)
app.include_router(analytics_router)
app.include_router(raffle_router)

@app.exception_handler(ConsoleError)
async def console_error_handler(request: Request, exc: ConsoleError):
    log.warning("request_failed", path=request.url.path, code=exc.code, status=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    structlog.contextvars.bind_contextvars(request_id=rid)
    response: Response = await call_next(request)
    response.headers["X-Request-ID"] = rid
    structlog.contextvars.clear_contextvars()
    return response

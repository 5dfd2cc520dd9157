"""flowpath FastAPI application.

Exposes session navigation over HTTP. The SessionRouter is created in the
lifespan from the configuration named by ``FLOWPATH_CONFIG_PATH`` (or
``flowpath.yaml`` in the working directory), unless one was injected.
"""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, Request

from flowpath.__version__ import __version__, get_version_info
from flowpath.config.loader import ConfigLoader
from flowpath.config.models import FlowpathConfig
from flowpath.core.errors import ConfigError, FlowpathError
from flowpath.observability.logging import ContextLogger, setup_logging
from flowpath.persistence.factory import StoreFactory
from flowpath.runtime.router import SessionRouter
from flowpath.server.dependencies import RouterDep
from flowpath.server.errors import flowpath_exception_handler, global_exception_handler
from flowpath.server.models import (
    AdvanceRequest,
    CompletedResponse,
    HealthResponse,
    PathResponse,
    ReadinessResponse,
    ResponsesResponse,
    RestartResponse,
    SessionResponse,
    StartSessionRequest,
    UserRequest,
    VersionResponse,
)

logger = logging.getLogger(__name__)
context_logger = ContextLogger(__name__)

DEFAULT_CONFIG_FILE = "flowpath.yaml"


def _resolve_config_path() -> str | None:
    config_path = os.environ.get("FLOWPATH_CONFIG_PATH")
    if not config_path and os.path.exists(DEFAULT_CONFIG_FILE):
        config_path = DEFAULT_CONFIG_FILE
    return config_path


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - build stores on startup, close them on shutdown."""
    load_dotenv()

    if getattr(app.state, "router", None) is not None:
        yield
        return

    config: FlowpathConfig | None = getattr(app.state, "config", None)
    if config is None:
        config_path = _resolve_config_path()
        if not config_path:
            logger.warning(
                "FLOWPATH_CONFIG_PATH not set and flowpath.yaml not found. "
                "App will start unconfigured."
            )
            yield
            return

        logger.info(f"Loading config from {config_path}")
        try:
            config = ConfigLoader.load(config_path)
        except (ConfigError, OSError) as e:
            logger.error(f"Failed to load config: {e}")
            yield
            return
        setup_logging(config.settings.log_level, config.settings.log_file)

    stores = StoreFactory.create(config.settings, config.flows)
    app.state.config = config
    app.state.router = SessionRouter.from_stores(stores)
    logger.info("SessionRouter initialized and ready.")
    try:
        yield
    finally:
        logger.info("Closing stores...")
        await stores.close()
        app.state.router = None


routes = APIRouter()


@routes.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe."""
    router = getattr(request.app.state, "router", None)
    return HealthResponse(status="healthy" if router else "starting", version=__version__)


@routes.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Readiness probe."""
    router = getattr(request.app.state, "router", None)

    if not router:
        return ReadinessResponse(
            ready=False, message="Router not initialized", checks={"router": False}
        )

    return ReadinessResponse(ready=True, message="Service is ready", checks={"router": True})


@routes.get("/version", response_model=VersionResponse)
def get_version() -> VersionResponse:
    """Get detailed version information."""
    info = get_version_info()
    return VersionResponse(
        version=str(info["full"]),
        major=int(info["major"]),
        minor=int(info["minor"]),
        patch=str(info["patch"]),
    )


@routes.post("/flows/{flow_id}/sessions", response_model=SessionResponse, status_code=201)
async def start_session(
    flow_id: str, request: StartSessionRequest, router: RouterDep
) -> SessionResponse:
    """Start a session on a flow; the response holds the entry node."""
    step = await router.start(request.user_id, flow_id)
    return SessionResponse.from_step(step)


@routes.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, router: RouterDep) -> SessionResponse:
    step = await router.current(session_id)
    return SessionResponse.from_step(step)


@routes.post("/sessions/{session_id}/next", response_model=SessionResponse)
async def advance_session(
    session_id: str, request: AdvanceRequest, router: RouterDep
) -> SessionResponse:
    """Answer the current node and move on; a finished flow returns no node."""
    log = context_logger.with_context(session_id=session_id)
    step = await router.advance(session_id, request.answer)
    log.debug(f"Advanced to {step.node.id if step.node else 'completion'}")
    return SessionResponse.from_step(step)


@routes.post("/sessions/{session_id}/back", response_model=SessionResponse)
async def back_session(session_id: str, router: RouterDep) -> SessionResponse:
    step = await router.back(session_id)
    return SessionResponse.from_step(step)


@routes.get("/sessions/{session_id}/path", response_model=PathResponse)
async def get_path(session_id: str, router: RouterDep) -> PathResponse:
    return PathResponse(session_id=session_id, path=await router.path(session_id))


@routes.get("/sessions/{session_id}/responses", response_model=ResponsesResponse)
async def get_responses(session_id: str, router: RouterDep) -> ResponsesResponse:
    return ResponsesResponse(session_id=session_id, responses=await router.responses(session_id))


@routes.post("/flows/{flow_id}/restart", response_model=RestartResponse)
async def restart_flow(flow_id: str, request: UserRequest, router: RouterDep) -> RestartResponse:
    """Forget a user's completed sessions of a flow so it can be taken again."""
    deleted = await router.restart(request.user_id, flow_id)
    return RestartResponse(flow_id=flow_id, user_id=request.user_id, deleted_sessions=deleted)


@routes.get("/flows/{flow_id}/completed", response_model=CompletedResponse)
async def flow_completed(flow_id: str, user_id: str, router: RouterDep) -> CompletedResponse:
    completed = await router.has_completed(user_id, flow_id)
    return CompletedResponse(flow_id=flow_id, user_id=user_id, completed=completed)


def create_app(
    config: FlowpathConfig | None = None, router: SessionRouter | None = None
) -> FastAPI:
    """Factory function.

    Args:
        config: Configuration to use instead of reading one from disk
        router: Ready-made router (stores are then owned by the caller)
    """
    application = FastAPI(
        title="flowpath",
        description="Branching onboarding flow traversal",
        version=__version__,
        lifespan=lifespan,
    )
    application.state.config = config
    application.state.router = router
    application.include_router(routes)
    application.add_exception_handler(FlowpathError, flowpath_exception_handler)
    application.add_exception_handler(Exception, global_exception_handler)
    return application


app = create_app()

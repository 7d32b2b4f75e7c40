"""Definition of FastAPI based web service."""

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.routing import Mount, Route, WebSocketRoute

import constants
import metrics
import version
from app import routers
from app.database import create_tables, initialize_database
from app.state import app_state
from client import UpstreamClientHolder
from configuration import configuration
from log import get_logger

logger = get_logger(__name__)

logger.info("Initializing app")


service_name = configuration.configuration.name


# running on FastAPI startup
@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """
    Initialize app resources.

    FastAPI lifespan context: loads configuration, initializes the database
    and opens the upstream HTTP session before serving requests. The session
    is closed on shutdown.
    """
    config_path = os.environ.get(constants.CONFIG_PATH_ENV_VARIABLE)
    if config_path:
        configuration.load_configuration(config_path)
    app_state.mark_check_complete("configuration_loaded", configuration.is_loaded())

    try:
        initialize_database()
        create_tables()
        app_state.mark_check_complete("database_initialized", True)
    except Exception as e:  # pylint: disable=broad-exception-caught
        app_state.mark_check_complete("database_initialized", False, str(e))

    await UpstreamClientHolder().load(configuration.upstream_configuration)
    app_state.mark_check_complete("upstream_client_initialized", True)

    get_logger("app.endpoints.handlers")
    app_state.mark_initialization_complete()
    logger.info("App startup complete")

    yield

    await UpstreamClientHolder().close()


app = FastAPI(
    title=f"{service_name} service - OpenAPI",
    summary=f"{service_name} service API specification.",
    description=f"{service_name} streaming chat relay API specification.",
    version=version.__version__,
    license_info={
        "name": "Apache 2.0",
        "url": "https://www.apache.org/licenses/LICENSE-2.0.html",
    },
    servers=[
        {"url": "http://localhost:8080/", "description": "Locally running service"}
    ],
    lifespan=lifespan,
)

cors = configuration.service_configuration.cors

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.allow_origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)


@app.middleware("")
async def rest_api_metrics(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Middleware with REST API counter update logic."""
    path = request.url.path
    logger.debug("Received request for path: %s", path)

    # ignore paths that are not part of the app routes
    if path not in app_routes_paths:
        return await call_next(request)

    # measure time to handle duration + update histogram
    with metrics.response_duration_seconds.labels(path).time():
        response = await call_next(request)

    # ignore /metrics endpoint that will be called periodically
    if not path.endswith("/metrics"):
        # just update metrics
        metrics.rest_api_calls_total.labels(path, response.status_code).inc()
    return response


logger.info("Including routers")
routers.include_routers(app)

app_routes_paths = [
    route.path
    for route in app.routes
    if isinstance(route, (Mount, Route, WebSocketRoute))
]

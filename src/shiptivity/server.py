# src/shiptivity/server.py
"""Starlette ASGI application for the Shiptivity board API.

The application owns exactly one BoardDB for its lifetime: the lifespan
opens it at startup and closes it at shutdown (uvicorn turns SIGINT and
SIGTERM into a lifespan shutdown). Handlers never open their own handle.

Usage:
    from shiptivity.core.config import ShiptivitySettings
    from shiptivity.server import create_app

    app = create_app(ShiptivitySettings())

    # Or use the server class for more control
    server = BoardServer(settings)
    app = server.app
"""

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from shiptivity.contracts.errors import (
    BoardInputError,
    ClientNotFoundError,
    ErrorBody,
    InvalidIdError,
    StoreCommitFailedError,
)
from shiptivity.contracts.records import Client
from shiptivity.core.config import ShiptivitySettings
from shiptivity.core.store.database import BoardDB
from shiptivity.core.store.queries import BoardQueries
from shiptivity.core.store.seed import seed_sample_clients
from shiptivity.core.validation import validate_identifier, validate_lane, validate_move_request
from shiptivity.engine.reorder import ReorderEngine

slog = structlog.get_logger(__name__)

ROOT_MESSAGE = "SHIPTIVITY API. Read documentation to see API docs"

_COMMIT_FAILED_BODY: ErrorBody = {
    "message": "Could not update client.",
    "long_message": "The board could not be updated. No changes were applied.",
}

# Marks a PUT body that is not valid JSON; rejected after the id check.
_MALFORMED_BODY = object()


def _serialize(clients: list[Client]) -> list[dict[str, Any]]:
    return [client.to_dict() for client in clients]


class BoardServer:
    """Main board server class.

    Encapsulates the store handle and the Starlette application.
    """

    def __init__(self, settings: ShiptivitySettings) -> None:
        self._settings = settings
        self._db: BoardDB | None = None
        self._app = self._create_app()

    def _create_app(self) -> Starlette:
        """Create the Starlette application with all routes."""
        prefix = self._settings.server.api_prefix
        routes = [
            Route("/", self._root_endpoint, methods=["GET"]),
            Route("/health", self._health_endpoint, methods=["GET"]),
            Route(f"{prefix}/clients", self._list_clients_endpoint, methods=["GET"]),
            Route(f"{prefix}/clients/{{client_id}}", self._get_client_endpoint, methods=["GET"]),
            Route(f"{prefix}/clients/{{client_id}}", self._update_client_endpoint, methods=["PUT"]),
        ]
        middleware = [
            Middleware(
                CORSMiddleware,
                allow_origins=list(self._settings.server.cors_origins),
                allow_methods=["GET", "PUT", "POST", "DELETE", "OPTIONS"],
                allow_headers=["Content-Type", "Authorization"],
            ),
        ]
        return Starlette(debug=False, routes=routes, middleware=middleware, lifespan=self._lifespan)

    @asynccontextmanager
    async def _lifespan(self, app: Starlette) -> AsyncIterator[None]:
        """Own the store handle for the lifetime of the process."""
        db_settings = self._settings.database
        db = BoardDB.from_url(db_settings.url, echo=db_settings.echo)
        if db_settings.seed_if_empty:
            inserted = seed_sample_clients(db)
            if inserted:
                slog.info("board_seeded", clients=inserted)
        self._db = db
        slog.info("board_store_opened", url=db_settings.url)
        try:
            yield
        finally:
            self._db = None
            db.close()
            slog.info("board_store_closed", url=db_settings.url)

    @property
    def app(self) -> Starlette:
        """Get the Starlette ASGI application."""
        return self._app

    @property
    def db(self) -> BoardDB:
        """The store handle (only available while the app is running)."""
        if self._db is None:
            raise RuntimeError("Board store is not open - is the application running?")
        return self._db

    # === Endpoint handlers ===

    async def _root_endpoint(self, request: Request) -> JSONResponse:
        """Handle GET /."""
        return JSONResponse({"message": ROOT_MESSAGE})

    async def _health_endpoint(self, request: Request) -> JSONResponse:
        """Handle GET /health."""
        count = await run_in_threadpool(BoardQueries(self.db).count)
        return JSONResponse({"status": "healthy", "clients": count})

    async def _list_clients_endpoint(self, request: Request) -> JSONResponse:
        """Handle GET {prefix}/clients?status={lane}."""
        queries = BoardQueries(self.db)
        raw_status = request.query_params.get("status")
        # An empty status parameter means "no filter"
        if raw_status:
            try:
                lane = validate_lane(raw_status)
            except BoardInputError as e:
                return JSONResponse(e.to_body(), status_code=400)
            clients = await run_in_threadpool(queries.list_by_lane, lane)
        else:
            clients = await run_in_threadpool(queries.list_all)
        return JSONResponse(_serialize(clients))

    async def _get_client_endpoint(self, request: Request) -> JSONResponse:
        """Handle GET {prefix}/clients/{client_id}."""
        raw_id = request.path_params["client_id"]
        try:
            client_id = await run_in_threadpool(validate_identifier, raw_id, self.db)
        except BoardInputError as e:
            return JSONResponse(e.to_body(), status_code=400)
        client = await run_in_threadpool(BoardQueries(self.db).get, client_id)
        if client is None:
            return JSONResponse(InvalidIdError("Cannot find client with that id.").to_body(), status_code=400)
        return JSONResponse(client.to_dict())

    async def _update_client_endpoint(self, request: Request) -> JSONResponse:
        """Handle PUT {prefix}/clients/{client_id}.

        Body: {"status"?: lane, "priority"?: integer}. Returns every client
        ordered by (status, priority) on success.
        """
        raw_id = request.path_params["client_id"]
        raw_body = await request.body()
        body: Any
        try:
            body = json.loads(raw_body) if raw_body.strip() else {}
        except ValueError:
            # JSONDecodeError, UnicodeDecodeError, or a number past the int digit limit
            body = _MALFORMED_BODY

        db = self.db
        try:
            move = await run_in_threadpool(validate_move_request, raw_id, body, db)
        except BoardInputError as e:
            slog.debug("client_update_rejected", client_id=raw_id, reason=e.long_message)
            return JSONResponse(e.to_body(), status_code=400)
        if move.is_empty:
            slog.debug("client_update_empty", client_id=move.client_id)

        try:
            await run_in_threadpool(ReorderEngine(db).apply, move)
        except ClientNotFoundError:
            return JSONResponse(InvalidIdError("Cannot find client with that id.").to_body(), status_code=400)
        except StoreCommitFailedError:
            return JSONResponse(dict(_COMMIT_FAILED_BODY), status_code=500)

        clients = await run_in_threadpool(BoardQueries(db).list_all)
        return JSONResponse(_serialize(clients))


def create_app(settings: ShiptivitySettings) -> Starlette:
    """Create the board ASGI application.

    Args:
        settings: Service configuration

    Returns:
        Starlette application (store opened by its lifespan)
    """
    return BoardServer(settings).app

"""Mini README: FastAPI adapter exposing the expense handler over HTTP.

Structure:
    * create_application - application factory wiring the resource route.
    * _method_not_allowed - turns the framework's 405 into the handler's.

The route body only translates between Starlette requests and the
framework-agnostic ``LedgerRequest``/``LedgerResponse`` pair. Methods the
route does not declare are rejected by Starlette before the route runs; the
405 it raises for the resource path is routed back through the handler so
every verb, including unknown ones, gets the same JSON error and ``Allow``
header. The handler runs in the threadpool so concurrent requests contend on
the store lock rather than on the event loop.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..configuration import ExpenseLedgerSettings, get_settings
from ..ledger import ExpenseStore, create_store
from ..logging_utils import configure_logging, get_logger
from .handler import ALLOWED_METHODS, ExpenseHandler, LedgerRequest, LedgerResponse

LOGGER = get_logger(__name__)


def _render(result: LedgerResponse) -> Response:
    if result.payload is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(result.payload, status_code=result.status_code, headers=result.headers)


async def _to_ledger_request(request: Request) -> LedgerRequest:
    return LedgerRequest(
        method=request.method,
        path=request.url.path,
        query=dict(request.query_params),
        body=await request.body(),
    )


def create_application(
    settings: Optional[ExpenseLedgerSettings] = None,
    store: Optional[ExpenseStore] = None,
) -> FastAPI:
    """Create the FastAPI application around an injected or configured store."""

    settings = settings or get_settings()
    configure_logging(settings)
    store = store if store is not None else create_store(settings)
    handler = ExpenseHandler(store)

    app = FastAPI(title="Expense Ledger", version="0.1.0")
    app.state.settings = settings
    app.state.handler = handler

    @app.api_route(settings.api_path, methods=list(ALLOWED_METHODS), include_in_schema=False)
    async def expenses(request: Request) -> Response:
        """Forward the request to the expense handler."""

        result = await run_in_threadpool(handler.handle, await _to_ledger_request(request))
        return _render(result)

    @app.exception_handler(StarletteHTTPException)
    async def _method_not_allowed(request: Request, error: StarletteHTTPException) -> Response:
        """Let the handler answer 405s on the resource path; defer everything else."""

        on_resource = request.url.path.rstrip("/") == settings.api_path.rstrip("/")
        if error.status_code != 405 or not on_resource:
            return await http_exception_handler(request, error)
        result = await run_in_threadpool(handler.handle, await _to_ledger_request(request))
        return _render(result)

    LOGGER.info(
        "Expense ledger ready on %s using the '%s' backend",
        settings.api_path,
        store.backend_name,
    )
    return app

"""Map domain faults to JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..domain.errors import INTERNAL_ERROR_MESSAGE, ClientFault, InternalFault

logger = logging.getLogger(__name__)


def _client_fault_handler(request: Request, exc: ClientFault) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def _internal_fault_handler(request: Request, exc: InternalFault) -> JSONResponse:
    logger.error("%s %s failed: %r", request.method, request.url.path, exc.__cause__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": INTERNAL_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the fault handlers on ``app``."""
    app.add_exception_handler(ClientFault, _client_fault_handler)
    app.add_exception_handler(InternalFault, _internal_fault_handler)

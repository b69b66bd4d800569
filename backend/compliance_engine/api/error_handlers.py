"""Error Handlers — ComplianceError translation for route-owning callers' FastAPI apps.

Invariants:
    - ComplianceError → JSON body from to_response(), status from its own http_status
    - 4xx logged at WARNING, 5xx at ERROR, with the error code and context as extras
    - Anything that is not a ComplianceError is left to the app's own handlers

Design Decisions:
    - This package defines no routes; it only translates its own errors (ADR: library, not service)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from compliance_engine.core.errors import ComplianceError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Install the ComplianceError handler on a FastAPI app."""

    @app.exception_handler(ComplianceError)
    async def compliance_error_handler(request: Request, exc: ComplianceError):
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"ComplianceError on {request.url.path}: {exc.message}",
            extra={
                "error_code": exc.code,
                "state": exc.context.state,
                "congress": exc.context.congress,
                "donor_id": exc.context.donor_id,
            },
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

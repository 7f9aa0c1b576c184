import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from iggy_bridge.core.exceptions import (
    BrokerConnectionError,
    IggyBridgeError,
    ProblemDetail,
    ProvisioningError,
    PollError,
    SendError,
    StatsError,
)

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"

_TITLES = {
    BrokerConnectionError: ("/broker-unavailable", "Broker Unavailable"),
    ProvisioningError: ("/provisioning-failed", "Failed to provision stream or topic"),
    SendError: ("/send-failed", "Failed to send message"),
    PollError: ("/poll-failed", "Failed to poll messages"),
    StatsError: ("/stats-failed", "Failed to get stats"),
}


def _problem(status: int, title: str, detail: str, type_: str = "about:blank") -> JSONResponse:
    problem = ProblemDetail(type=type_, title=title, status=status, detail=detail)
    return JSONResponse(status_code=status, content=problem.model_dump(mode="json"), media_type=PROBLEM_JSON)


def _validation_detail(exc: RequestValidationError) -> str:
    msgs = []
    for err in exc.errors():
        msg = str(err.get("msg", "invalid request"))
        msgs.append(msg.removeprefix("Value error, "))
    return "; ".join(msgs) or "invalid request"


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError):
        return _problem(400, "Bad Request", _validation_detail(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Request, exc: ValueError):
        return _problem(400, "Bad Request", str(exc))

    @app.exception_handler(IggyBridgeError)
    async def bridge_error_handler(request: Request, exc: IggyBridgeError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        type_, title = _TITLES.get(type(exc), ("about:blank", "Broker Error"))
        status = 503 if isinstance(exc, BrokerConnectionError) else 502
        return _problem(status, title, str(exc), type_)

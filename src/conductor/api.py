"""
api.py
- FastAPI application exposing the redeploy trigger.
- One route, `/{name}`, accepting any HTTP method and a bearer token.
- Errors are logged for the operator, then mapped to a status code and plain-text body.
"""

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPBearer
from loguru import logger

from conductor.core.constants import SUCCESS_BODY
from conductor.core.errors import ConductorError, Unauthorized
from conductor.lib.auth import check_token
from conductor.lib.compose import redeploy

bearer = HTTPBearer(auto_error=False)


async def conductor_error(request: Request, exc: ConductorError):
    logger.error(f"[api] {request.method} {request.url.path} -> {exc.status_code}: {exc.describe()}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return PlainTextResponse(str(exc), status_code=exc.status_code, headers=headers)


async def trigger_redeploy(request: Request):
    state = request.app.state
    credentials = await bearer(request)
    check_token(credentials.credentials if credentials else None, state.config.token)

    await redeploy(request.path_params["name"], state.config.compositions, state.runner, locks=state.locks)
    return PlainTextResponse(SUCCESS_BODY)


def create_app(config, runner, locks=None):
    """
    Build the trigger application around a loaded Config and a ProcessRunner.

    Docs and OpenAPI routes are disabled so every single-segment path is a composition name.
    The trigger is a plain route with no method list, so every method reaches the auth check.
    """
    api = FastAPI(
        title="conductor",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    api.state.config = config
    api.state.runner = runner
    api.state.locks = locks

    api.add_exception_handler(ConductorError, conductor_error)
    api.router.add_route("/{name}", trigger_redeploy, methods=None)
    return api

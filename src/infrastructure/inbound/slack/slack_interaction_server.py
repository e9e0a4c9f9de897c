import logging
import math
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from fastapi.concurrency import run_in_threadpool
import uvicorn

from src.config.settings import Settings, settings
from src.infrastructure.adapters.rancher.rancher_client import RancherControlPlaneClient
from src.infrastructure.adapters.slack.slack_chat_client import SlackChatClient
from src.infrastructure.observability.structured_runtime_logger import StructuredRuntimeLogger
from src.interaction.domain.callback_errors import CallbackError, UnsupportedMethodError
from src.interaction.domain.dispatch_outcome import DispatchOutcome
from src.interaction.services.action_router import build_router
from src.interaction.services.artifact_waiter import ArtifactWaiter
from src.interaction.services.callback_decoder import SlackCallbackDecoder
from src.interaction.services.callback_dispatcher import CallbackDispatcher
from src.interaction.services.callback_token_verifier import CallbackTokenVerifier
from src.interaction.services.operation_handlers import OperationHandlers

logger = logging.getLogger(__name__)

app = FastAPI()

# Dependencies (Injected in real app)
dispatcher: CallbackDispatcher = None  # type: ignore
runtime_logger = StructuredRuntimeLogger()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def setup_dependencies(disp: CallbackDispatcher, logger: Optional[StructuredRuntimeLogger] = None):
    global dispatcher, runtime_logger
    dispatcher = disp
    runtime_logger = logger or StructuredRuntimeLogger()


def build_chat_client(config: Settings) -> SlackChatClient:
    # WebClient takes whole seconds; never round a timeout down to zero
    return SlackChatClient(config.SLACK_BOT_TOKEN, timeout=max(1, math.ceil(config.HTTP_TIMEOUT_SECONDS)))


def build_dispatcher(config: Settings) -> CallbackDispatcher:
    """Builds one shared chat client and control-plane client for all requests."""
    chat = build_chat_client(config)
    control_plane = RancherControlPlaneClient(
        base_url=config.RANCHER_URL,
        access_key=config.RANCHER_ACCESS_KEY,
        secret_key=config.RANCHER_SECRET_KEY,
        log_dir=config.LOG_DIR,
        log_tail_lines=config.LOG_TAIL_LINES,
        canary_config=config.CANARY_HAPROXY_CONFIG,
        max_retries=config.HTTP_MAX_RETRIES,
        timeout=config.HTTP_TIMEOUT_SECONDS,
    )
    handlers = OperationHandlers(
        chat=chat,
        control_plane=control_plane,
        bot_channel=config.SLACK_BOT_CHANNEL,
        artifact_waiter=ArtifactWaiter(
            initial_delay_seconds=config.LOG_ARTIFACT_INITIAL_DELAY_SECONDS,
            max_wait_seconds=config.LOG_ARTIFACT_MAX_WAIT_SECONDS,
        ),
    )
    decoder = SlackCallbackDecoder(CallbackTokenVerifier(config.SLACK_VERIFICATION_TOKEN))
    return CallbackDispatcher(decoder, build_router(handlers), runtime_logger)


@app.exception_handler(CallbackError)
async def callback_error_handler(request: Request, exc: CallbackError):
    return Response(status_code=exc.status_code)


async def slack_interactions(request: Request):
    if request.method != "POST":
        logger.error(f"[ERROR] Invalid method: {request.method}")
        runtime_logger.emit(event_type="CALLBACK_REJECTED", status="method_not_allowed", method=request.method)
        raise UnsupportedMethodError(request.method)

    body = await request.body()
    outcome = await run_in_threadpool(dispatcher.dispatch, body)
    return _to_response(outcome)


def install_route(path: str) -> None:
    """Mounts the interactions endpoint on `path` unless it is already there."""
    if any(getattr(route, "path", None) == path for route in app.routes):
        return
    app.add_api_route(path, slack_interactions, methods=ALL_METHODS)


install_route(settings.INTERACTIONS_PATH)


def _to_response(outcome: DispatchOutcome) -> Response:
    background = None
    if outcome.after_response:
        background = BackgroundTasks()
        for task in outcome.after_response:
            background.add_task(task)

    if outcome.body is not None:
        return JSONResponse(content=outcome.body, status_code=outcome.status_code, background=background)
    return Response(status_code=outcome.status_code, background=background)


def run_server(config: Settings = settings):
    install_route(config.INTERACTIONS_PATH)
    setup_dependencies(build_dispatcher(config), runtime_logger)
    uvicorn.run(app, host=config.SERVER_HOST, port=config.SERVER_PORT)

import logging
from typing import Optional

from src.infrastructure.observability.structured_runtime_logger import StructuredRuntimeLogger
from src.interaction.domain.callback_errors import (
    AuthError,
    CallbackError,
    DecodeError,
    UnknownActionKindError,
    UnknownOperationError,
)
from src.interaction.domain.dispatch_outcome import DispatchOutcome
from src.interaction.services.action_router import ActionRouter
from src.interaction.services.callback_decoder import SlackCallbackDecoder

logger = logging.getLogger(__name__)


class CallbackDispatcher:
    """
    Decode -> authenticate -> route -> invoke, for one inbound callback.
    Decode, auth and routing failures end the request before any
    collaborator is called.
    """

    def __init__(
        self,
        decoder: SlackCallbackDecoder,
        router: ActionRouter,
        runtime_logger: Optional[StructuredRuntimeLogger] = None,
    ):
        self.decoder = decoder
        self.router = router
        self.runtime_logger = runtime_logger or StructuredRuntimeLogger()

    def dispatch(self, body: bytes) -> DispatchOutcome:
        # 1. Decode + token check
        try:
            callback = self.decoder.decode(body)
        except DecodeError as e:
            logger.error(f"Failed to decode callback: {e}")
            self.runtime_logger.emit(event_type="CALLBACK_DECODE_FAILED", status="error", reason=str(e))
            return DispatchOutcome.empty(e.status_code)
        except AuthError as e:
            logger.error("Invalid verification token")
            self.runtime_logger.emit(event_type="CALLBACK_UNAUTHORIZED", status="unauthorized")
            return DispatchOutcome.empty(e.status_code)

        # 2. Route
        try:
            handler = self.router.route(callback)
        except UnknownOperationError as e:
            logger.warning(str(e))
            self.runtime_logger.emit(
                event_type="CALLBACK_UNKNOWN_OPERATION",
                status="ignored",
                operation_id=callback.operation_id,
                user_id=callback.user.id,
            )
            return DispatchOutcome.empty(e.status_code)
        except UnknownActionKindError as e:
            logger.error(str(e))
            self.runtime_logger.emit(
                event_type="CALLBACK_FAILED",
                status="unknown_action_kind",
                action_kind=str(callback.action_kind),
            )
            return DispatchOutcome.empty(e.status_code)

        # 3. Invoke
        try:
            outcome = handler(callback)
        except CallbackError as e:
            logger.error(f"Callback '{callback.operation_id}' rejected: {e}")
            self.runtime_logger.emit(
                event_type="CALLBACK_FAILED",
                status=type(e).__name__,
                operation_id=callback.operation_id,
                user_id=callback.user.id,
            )
            return DispatchOutcome.empty(e.status_code)

        self.runtime_logger.emit(
            event_type="CALLBACK_OK",
            status=outcome.status_code,
            action_kind=getattr(callback.action_kind, "value", callback.action_kind),
            operation_id=callback.operation_id,
            user_id=callback.user.id,
            channel_id=callback.channel_id,
        )
        return outcome
